import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from subtracker.api.endpoints import subscriptions
from subtracker.core.database import Base, engine, ping
from subtracker.core.errors import ErrorKind, SubscriptionError
from subtracker.core.logging import setup_logging
from subtracker.core.settings import settings

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_FOUND: 404,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    if settings.db_auto_create:
        Base.metadata.create_all(bind=engine)
    ping(engine)
    logger.info("startup.ready database=%s", engine.url.render_as_string(hide_password=True))

    yield

    engine.dispose()


app = FastAPI(title="Subscription Tracker API", version="1.0.0", lifespan=lifespan)

# Configure CORS
origins = settings.resolved_cors_origins()
if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(SubscriptionError)
async def subscription_error_handler(request: Request, exc: SubscriptionError):
    status_code = ERROR_STATUS.get(exc.kind, 500)
    if status_code == 500:
        logger.error(
            "request.failed method=%s path=%s kind=%s error=%s",
            request.method,
            request.url.path,
            exc.kind.value,
            exc.message,
        )
        return _error(500, "internal server error")
    return _error(status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errs = exc.errors()
    if errs:
        first = errs[0]
        if first.get("type") == "json_invalid":
            return _error(400, "invalid JSON body")
        # Integer parts are character offsets or list indexes, not field names
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body" and not isinstance(p, int))
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    else:
        message = "invalid request"
    return _error(400, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error(exc.status_code, detail)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("request.unhandled method=%s path=%s", request.method, request.url.path)
    return _error(500, "internal server error")


# API Routes
app.include_router(subscriptions.router, prefix="/api/v1", tags=["subscriptions"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.http_host, port=settings.http_port, log_level=settings.log_level)
