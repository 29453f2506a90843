import logging
import time
import uuid
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from episure.api.router import api_router
from episure.core.config import Settings, get_settings
from episure.core.db import Database, init_models
from episure.core.errors import DomainError, ValidationFailed
from episure.core.logging import request_id_ctx, setup_logging
from episure.core.responses import error_body

logger = logging.getLogger(__name__)

def create_app(settings: Settings | None = None, db: Database | None = None) -> FastAPI:
    """Build the application. Engine and settings live on ``app.state`` for the process lifetime."""
    if settings is None:
        load_dotenv()
        settings = get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.db = db or Database.from_settings(settings)
        await init_models(app.state.db, settings)
        logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)
        try:
            yield
        finally:
            if db is None:
                await app.state.db.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    if db is not None:
        app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.CORS_ORIGIN.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000
        logger.info(
            f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {process_time:.2f}ms"
        )
        return response

    # registered last so it runs first and the request log line carries the id
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex
        token = request_id_ctx.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["x-request-id"] = rid
        return response

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        if exc.status_code >= 500:
            logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
        details = getattr(exc, "errors", None)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.kind, details))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return await domain_error_handler(request, ValidationFailed("Validation failed", jsonable_encoder(exc.errors())))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), "http_error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
        return JSONResponse(status_code=500, content=error_body("An internal server error occurred.", "internal_error"))

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app

app = create_app()

def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "episure.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENV == "local",
    )

if __name__ == "__main__":
    run()
