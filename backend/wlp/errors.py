"""Error taxonomy shared by the guard, the lifecycle engine and the routers.

Every failure is an ``HTTPException`` so FastAPI renders it as
``{"detail": "..."}`` with the matching status code.
"""
from fastapi import HTTPException, status


class ValidationFailure(HTTPException):
    """Malformed or out-of-range input. The message names the offending field."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthenticationFailure(HTTPException):
    """Missing, invalid or expired session. Never says which check failed."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class AuthorizationFailure(HTTPException):
    """Valid identity, but the wrong role or a foreign tenant."""

    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class StateConflict(HTTPException):
    """Illegal transition for the current status, or a duplicate unique key."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class CollaboratorFailure(HTTPException):
    """The data store or token signer failed. Details stay in the server log."""

    def __init__(self):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


def format_validation_errors(errors) -> str:
    """Render FastAPI/pydantic validation errors as ``"<field>: <reason>"``."""
    messages = []
    for err in errors:
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        reason = err.get("msg", "invalid value").removeprefix("Value error, ")
        messages.append(f"{field}: {reason}" if field else reason)
    return "; ".join(messages) or "Invalid payload"
