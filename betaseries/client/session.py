"""Authenticated session for the BetaSeries API.

A session owns the base URL, protocol version, API key, the bearer token
(once fetched) and the `requests.Session` used as transport. It attaches the
BetaSeries headers to every request and performs exactly one round trip per
`send`.

The token is fetched once during `authenticate` and never refreshed. Sharing
a session across threads is fine for reads; the one-time token write is the
caller's to serialize if authentication can be delayed or retried.
"""

from __future__ import annotations

import hashlib
import logging
import time
from urllib.parse import urlparse

import requests

from betaseries.client.decode import decode, decode_error
from betaseries.client.endpoints import (
    MEMBERS_AUTH,
    PreparedCall,
    QueryBuilder,
    build_call,
)
from betaseries.client.errors import (
    AuthenticationError,
    InvalidBaseUrlError,
    MissingPayloadError,
    ServiceError,
)
from betaseries.client.models import Token, TokenEnvelope
from betaseries.config.betaseries_settings import (
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URL,
)

logger = logging.getLogger(__name__)

HEADER_VERSION = "X-BetaSeries-Version"
HEADER_KEY = "X-BetaSeries-Key"
HEADER_TOKEN = "X-BetaSeries-Token"


def _check_base_url(base_url: str) -> str:
    parsed = urlparse(base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidBaseUrlError(base_url)
    return base_url.rstrip("/")


def hash_password(password: str) -> str:
    """MD5 hex digest, as documented for members/auth."""
    return hashlib.md5(password.encode("utf-8")).hexdigest()


class BetaSeriesSession:
    """Per-member handle used to issue every BetaSeries call.

    Attributes:
        base_url (str): API root, without trailing slash.
        version (str): Value of the X-BetaSeries-Version header.
        api_key (str): Value of the X-BetaSeries-Key header.
        token (Token | None): Set by `authenticate`, None in anonymous mode.
        http (requests.Session): Transport handle; injectable for tests.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        version: str = DEFAULT_API_VERSION,
        http: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.base_url = _check_base_url(base_url)
        self.version = version
        self.api_key = api_key
        self.token: Token | None = None
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    @classmethod
    def authenticate(
        cls,
        api_key: str,
        login: str = "",
        password: str = "",
        **kwargs,
    ) -> "BetaSeriesSession":
        """Creates a session and, when credentials are given, fetches a token.

        Empty login or password is not an error: the session stays anonymous
        and no request is sent.

        Args:
            api_key: BetaSeries developer key.
            login: Member login.
            password: Member password, in clear; only its MD5 is sent.
            **kwargs: Forwarded to the constructor (base_url, version, http,
                timeout).

        Raises:
            InvalidBaseUrlError: base_url is not an http(s) URL.
            AuthenticationError: The service refused the credentials.
            DecodeError: The auth response (or its error body) is malformed.
            MissingPayloadError: The auth response carries no token.
            requests.exceptions.RequestException: Transport failure.
        """
        session = cls(api_key, **kwargs)
        if not login or not password:
            logger.info("BETASERIES_AUTH_SKIPPED anonymous session")
            return session

        session.token = session._fetch_token(login, password)
        return session

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            HEADER_VERSION: self.version,
            HEADER_KEY: self.api_key,
        }
        if self.token is not None:
            headers[HEADER_TOKEN] = self.token.token
        return headers

    def send(self, call: PreparedCall) -> requests.Response:
        """Performs one HTTP round trip for a prepared call.

        Transport exceptions are re-raised unchanged. The caller owns the
        returned response and must close it (`decode` does).
        """
        start_ts = time.perf_counter()
        endpoint = urlparse(call.url).path

        try:
            logger.debug(
                "BETASERIES_REQUEST_START method=%s endpoint=%s", call.method, endpoint
            )
            response = self.http.request(
                call.method, call.url, headers=self.headers(), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            duration = (time.perf_counter() - start_ts) * 1000
            logger.debug(
                "BETASERIES_REQUEST_FAILED method=%s endpoint=%s latency_ms=%.2f error=%s",
                call.method,
                endpoint,
                duration,
                str(e),
            )
            raise

        duration = (time.perf_counter() - start_ts) * 1000
        logger.info(
            "BETASERIES_REQUEST_SUCCESS method=%s endpoint=%s status=%s latency_ms=%.2f",
            call.method,
            endpoint,
            response.status_code,
            duration,
        )
        return response

    def _fetch_token(self, login: str, password: str) -> Token:
        query = (
            QueryBuilder()
            .set("login", login)
            .set("password", hash_password(password))
        )
        response = self.send(build_call(self.base_url, MEMBERS_AUTH, query))

        if response.status_code != requests.codes.ok:
            envelope = decode_error(response)
            logger.info(
                "BETASERIES_AUTH_REFUSED login=%s status=%s",
                login,
                response.status_code,
            )
            raise AuthenticationError(envelope.error_details(), response.status_code)

        try:
            envelope = decode(TokenEnvelope, response)
        except ServiceError as e:
            raise AuthenticationError(e.errors, e.status_code) from e

        if not envelope.token:
            raise MissingPayloadError("token")

        logger.info(
            "BETASERIES_AUTH_OK login=%s user_id=%s", login, envelope.user.id
        )
        return envelope.to_token()

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "BetaSeriesSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def authenticate(
    api_key: str, login: str = "", password: str = "", **kwargs
) -> BetaSeriesSession:
    """Module-level shortcut for `BetaSeriesSession.authenticate`."""
    return BetaSeriesSession.authenticate(api_key, login, password, **kwargs)
