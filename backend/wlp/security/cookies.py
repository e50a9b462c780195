"""Session cookie transport."""
from fastapi import Response

from wlp.config import settings
from wlp.security.tokens import TOKEN_TTL

SESSION_MAX_AGE = int(TOKEN_TTL.total_seconds())


def _cookie_options() -> dict:
    # SameSite=None is only honoured by browsers on Secure cookies
    cross_site = settings.CROSS_SITE
    options = {
        "key": settings.COOKIE_NAME,
        "path": "/",
        "httponly": True,
        "samesite": "none" if cross_site else "lax",
        "secure": cross_site or settings.is_production,
    }
    if settings.COOKIE_DOMAIN:
        options["domain"] = settings.COOKIE_DOMAIN
    return options


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(value=token, max_age=SESSION_MAX_AGE, **_cookie_options())


def clear_session_cookie(response: Response) -> None:
    response.set_cookie(value="", max_age=0, **_cookie_options())
