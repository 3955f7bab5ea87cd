"""
Response decoding for BetaSeries envelopes.

Post-conditions enforced here, in order:
1. body parses as JSON of the envelope's shape, else DecodeError
2. `errors` is empty, else ServiceError (any payload is discarded)
3. HTTP status is 2xx, else requests.HTTPError
4. list payload is non-empty, else the envelope's NotFoundError
5. item payload is present, else MissingPayloadError

The response is closed on every exit path.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import requests
from pydantic import ValidationError

from betaseries.client.errors import DecodeError, MissingPayloadError, ServiceError
from betaseries.client.models import Envelope, ErrorEnvelope

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Envelope)


def _load_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise DecodeError(str(e), response.status_code) from e


def _validate(envelope_cls: type[E], data: Any, status_code: int) -> E:
    try:
        return envelope_cls.model_validate(data)
    except ValidationError as e:
        raise DecodeError(str(e), status_code) from e


def decode(envelope_cls: type[E], response: requests.Response) -> E:
    """Decodes a response into `envelope_cls` and checks its post-conditions.

    Args:
        envelope_cls: The envelope shape expected for this endpoint.
        response: The raw HTTP response. It is always closed.

    Returns:
        The validated envelope. List payloads keep the order the API sent.

    Raises:
        DecodeError: The body is not JSON, or not the envelope's shape.
        ServiceError: The envelope's `errors` list is non-empty.
        requests.exceptions.HTTPError: Non-2xx status without reported errors.
        NotFoundError: The list payload is empty (subclass per family).
        MissingPayloadError: The single-item payload is absent.
    """
    try:
        envelope = _validate(
            envelope_cls, _load_json(response), response.status_code
        )

        if envelope.errors:
            raise ServiceError(envelope.error_details(), response.status_code)

        response.raise_for_status()

        field = envelope_cls.payload_field
        payload = envelope.payload()
        if field is not None:
            if payload is None:
                raise MissingPayloadError(field)
            if isinstance(payload, list) and not payload:
                raise envelope_cls.not_found()

        logger.debug(
            "BETASERIES_DECODE_OK envelope=%s items=%s",
            envelope_cls.__name__,
            len(payload) if isinstance(payload, list) else 1,
        )
        return envelope
    finally:
        response.close()


def decode_error(response: requests.Response) -> ErrorEnvelope:
    """Decodes the error envelope of a failed call.

    A body that cannot be parsed is reported as DecodeError rather than
    letting the parse failure escape.
    """
    try:
        return _validate(ErrorEnvelope, _load_json(response), response.status_code)
    finally:
        response.close()
