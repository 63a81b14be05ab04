"""Authenticated request dispatch.

A session ties a token manager to a request executor: it fetches a valid
token, sends the request and translates the response into an outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..errors import TransportError
from ..telemetry import get_logger
from .errors import ErrorTranslator
from .outcomes import Outcome, TransportFailure

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .http_executor import RequestExecutor
    from .token_manager import TokenManager


class Session:
    """Dispatches authenticated requests and returns typed outcomes.

    With ``invalidate_on_unauthorized`` set, a 401 response drops the cached
    token, if it is still the one the request carried, so the next call
    re-authenticates. The 401 itself is still returned to the caller;
    nothing is retried.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        token_manager: TokenManager,
        *,
        invalidate_on_unauthorized: bool = False,
    ) -> None:
        self._executor = executor
        self._token_manager = token_manager
        self.invalidate_on_unauthorized = invalidate_on_unauthorized
        self._logger = get_logger()

    @property
    def token_manager(self) -> TokenManager:
        return self._token_manager

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def dispatch(
        self,
        method: str,
        url: str,
        body: Any = None,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> Outcome:
        """Send an authenticated request.

        Raises:
            AuthError: If no token can be obtained.
            ValidationError: If the request is malformed before sending.
        """
        token = self._token_manager.get_token()
        try:
            raw = self._executor.execute(method, url, body, token=token, params=params)
        except TransportError as e:
            return TransportFailure(e)

        if raw.status_code == 401 and self.invalidate_on_unauthorized:
            self._logger.warning("Unauthorized response, dropping cached token", url=url)
            self._token_manager.invalidate(token)

        return ErrorTranslator.translate(raw)
