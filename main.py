import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from config import Settings, get_settings
from database import Database
from errors import AppError, StoreError, ValidationError
from routers import auth, reports, transactions
from security import build_password_context, require_token

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database(app.state.settings.DATABASE_URL)
    await database.create_tables()
    app.state.database = database
    try:
        yield
    finally:
        await database.dispose()


async def app_error_handler(request: Request, exc: AppError) -> Response:
    if isinstance(exc, StoreError):
        logger.error("%s %s: %s", request.method, request.url.path, exc.detail, exc_info=exc.__cause__)
    if exc.message is None:
        return Response(status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content={exc.body_key: exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # submitted values, passwords included, stay out of the response and the log
    problems = [(error["loc"], error["type"]) for error in exc.errors()]
    logger.info("%s %s rejected: %s", request.method, request.url.path, problems)
    return JSONResponse(status_code=400, content={"error": ValidationError.default_message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(title="Personal Expense Tracker API", lifespan=lifespan)
    app.state.settings = settings
    app.state.pwd_context = build_password_context(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Registration and login are the only routes outside the token gate
    app.include_router(auth.router)
    protected = [Depends(require_token)]
    app.include_router(transactions.router, dependencies=protected)
    app.include_router(reports.router, dependencies=protected)

    @app.get("/", response_class=PlainTextResponse, dependencies=protected)
    async def root():
        return "Welcome to the Personal Expense Tracker API"

    return app


app = create_app()


def run():
    settings = get_settings()
    logger.info("Server running on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
