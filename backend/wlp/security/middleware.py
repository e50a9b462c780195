"""Identity attachment middleware.

Resolves the session cookie into a ``Principal`` on ``request.state``. It
never rejects a request: anonymous and invalid sessions both resolve to
``None`` and the route's guard decides whether that is acceptable.
"""
import logging
from typing import Optional

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware

from wlp.security.principal import Principal
from wlp.security.tokens import SessionTokenService

logger = logging.getLogger(__name__)


class IdentityMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, token_service: SessionTokenService, cookie_name: str):
        super().__init__(app)
        self.token_service = token_service
        self.cookie_name = cookie_name

    def resolve(self, token: Optional[str]) -> Optional[Principal]:
        if not token:
            return None
        try:
            return self.token_service.verify(token)
        except HTTPException:
            return None

    async def dispatch(self, request: Request, call_next):
        principal = self.resolve(request.cookies.get(self.cookie_name))
        if principal is None and self.cookie_name in request.cookies:
            logger.debug("Ignoring invalid session cookie on %s %s", request.method, request.url.path)
        request.state.principal = principal
        return await call_next(request)
