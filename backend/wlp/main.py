"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from wlp.config import settings
from wlp.database import Base, engine
from wlp.errors import CollaboratorFailure, format_validation_errors
from wlp.security.middleware import IdentityMiddleware
from wlp.security.tokens import SessionTokenService

# Import routers
from wlp.routers import auth, account, employer, room_requests, workers, frontdesk, admin, hotels

# Import all models so Base.metadata knows about them
from wlp.models.user import User                           # noqa: F401
from wlp.models.employer import Employer                   # noqa: F401
from wlp.models.hotel import Hotel                         # noqa: F401
from wlp.models.room_request import RoomRequest            # noqa: F401
from wlp.models.extension_request import ExtensionRequest  # noqa: F401
from wlp.models.event_log import EventLogEntry             # noqa: F401
from wlp.models.worker import Worker                       # noqa: F401
from wlp.models.reservation import Reservation             # noqa: F401

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Workforce Lodging Platform",
    description="Room requests from staffing employers, decided and tracked by hotel front desks",
    version="0.1.0",
)

# Loaded once; every verification in the process uses this secret
token_service = SessionTokenService(settings.JWT_SECRET)
app.state.token_service = token_service

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(IdentityMiddleware, token_service=token_service, cookie_name=settings.COOKIE_NAME)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": format_validation_errors(exc.errors())})


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database failure on %s %s", request.method, request.url.path, exc_info=exc)
    failure = CollaboratorFailure()
    return JSONResponse(status_code=failure.status_code, content={"detail": failure.detail})


# Register routers
app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(account.router, prefix="/api", tags=["Account"])
app.include_router(hotels.router, prefix="/api/hotels", tags=["Hotels"])
app.include_router(employer.router, prefix="/api/employer", tags=["Employer"])
app.include_router(room_requests.router, prefix="/api/employer", tags=["RoomRequests"])
app.include_router(workers.router, prefix="/api/employer", tags=["Workers"])
app.include_router(frontdesk.router, prefix="/api/frontdesk", tags=["FrontDesk"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
