"""Authentication token cache for the Astra SDK.

Thread-safe token cache with a time-to-live. Renewal is single-flight: when
several threads see a stale token, one of them exchanges the credentials and
the others wait for its result.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Callable

from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from ..config import DEFAULT_TOKEN_TTL
from ..errors import AuthError, ErrorCode, InvalidConfigError, TransportError
from ..models import AuthRequest, AuthResponse
from ..telemetry import get_logger, trace_operation

if TYPE_CHECKING:
    from ..config import AstraConfig
    from .http_executor import RequestExecutor

AUTH_SUCCESS_STATUSES = frozenset({200, 201})


class TokenState(StrEnum):
    """States of the token cache."""

    EMPTY = "empty"
    VALID = "valid"
    STALE = "stale"


@dataclass(frozen=True)
class CachedToken:
    """Token value and the clock reading at which it was issued."""

    value: str
    issued_at: float


class TokenManager:
    """Owns session credentials and the cached authentication token.

    Attributes:
        ttl_seconds: How long a token is served from cache.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        *,
        auth_url: str | None = None,
        username: str | None = None,
        password: SecretStr | str | None = None,
        bearer_token: SecretStr | str | None = None,
        ttl_seconds: float = DEFAULT_TOKEN_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize token manager.

        Args:
            executor: Executor used for the credential exchange.
            auth_url: Authentication endpoint URL.
            username: Username for the credential exchange.
            password: Password for the credential exchange.
            bearer_token: Static token; disables the credential exchange.
            ttl_seconds: Token time-to-live in seconds.
            clock: Monotonic clock returning seconds.

        Raises:
            InvalidConfigError: If neither credentials nor a token are given.
        """
        if isinstance(password, str):
            password = SecretStr(password)
        if isinstance(bearer_token, str):
            bearer_token = SecretStr(bearer_token)

        if bearer_token is None:
            missing = [
                name
                for name, value in (("auth_url", auth_url), ("username", username), ("password", password))
                if not value
            ]
            if missing:
                msg = f"Missing credentials: {', '.join(missing)}"
                raise InvalidConfigError(msg, fields=missing)

        self._executor = executor
        self._auth_url = auth_url
        self._username = username
        self._password = password
        self._bearer_token = bearer_token
        self.ttl_seconds = ttl_seconds
        self._clock = clock

        self._token: CachedToken | None = None
        self._lock = threading.Lock()
        self._logger = get_logger()

    @classmethod
    def from_config(
        cls,
        config: AstraConfig,
        executor: RequestExecutor,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> TokenManager:
        """Create a token manager for a configured session."""
        return cls(
            executor,
            auth_url=config.auth_url,
            username=config.username,
            password=config.password,
            bearer_token=config.bearer_token,
            ttl_seconds=config.token_ttl,
            clock=clock,
        )

    @property
    def uses_bearer_token(self) -> bool:
        """Whether the token is static."""
        return self._bearer_token is not None

    @property
    def state(self) -> TokenState:
        """Current state of the cache."""
        if self._bearer_token is not None:
            return TokenState.VALID
        token = self._token
        if token is None:
            return TokenState.EMPTY
        return TokenState.STALE if self._is_stale(token) else TokenState.VALID

    def _is_stale(self, token: CachedToken | None) -> bool:
        """Check if a token must be renewed; expiry instant included."""
        if token is None:
            return True
        return self._clock() - token.issued_at >= self.ttl_seconds

    def get_token(self) -> str:
        """Get a valid token, renewing it if the cache is empty or stale.

        Returns:
            Token value.

        Raises:
            AuthError: If the credential exchange fails.
        """
        if self._bearer_token is not None:
            return self._bearer_token.get_secret_value()

        token = self._token
        if not self._is_stale(token):
            return token.value  # type: ignore[union-attr]

        with self._lock:
            # Another thread may have renewed while this one waited
            token = self._token
            if self._is_stale(token):
                token = self._renew()
                self._token = token
            return token.value  # type: ignore[union-attr]

    def invalidate(self, token: str | None = None) -> None:
        """Drop the cached token, forcing renewal on next access.

        Args:
            token: Only drop the cache if it still holds this value. A token
                renewed by another caller in the meantime is kept.
        """
        with self._lock:
            if token is None or (self._token is not None and self._token.value == token):
                self._token = None

    def _renew(self) -> CachedToken:
        """Exchange credentials for a new token.

        Raises:
            AuthError: On any status other than 200/201, a malformed body or
                a transport failure. The cache is left untouched.
        """
        request = AuthRequest(username=self._username or "", password=self._password or SecretStr(""))

        with trace_operation("token_renewal", attributes={"auth.url": self._auth_url}):
            try:
                raw = self._executor.execute("POST", self._auth_url or "", request.to_payload())
            except TransportError as e:
                self._logger.error("Authentication request failed", error=e.message)
                msg = f"Cannot generate authentication token: {e.message}"
                raise AuthError(msg, correlation_id=e.correlation_id) from e

            if raw.status_code not in AUTH_SUCCESS_STATUSES:
                self._logger.error("Authentication rejected", status=raw.status_code)
                msg = f"Cannot generate authentication token HTTP_CODE={raw.status_code}"
                raise AuthError(msg, status_code=raw.status_code, body=raw.text)

            try:
                response = AuthResponse.model_validate(raw.json())
            except PydanticValidationError as e:
                msg = "Authentication succeeded but no authToken in response"
                raise AuthError(
                    msg,
                    status_code=raw.status_code,
                    body=raw.text,
                    code=ErrorCode.AUTH_RESPONSE_INVALID,
                ) from e

        self._logger.info(
            "Authenticated",
            username=self._username,
            ttl_seconds=self.ttl_seconds,
        )
        return CachedToken(value=response.auth_token, issued_at=self._clock())
