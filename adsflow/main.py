import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load env from the project root .env before settings are read
project_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv(dotenv_path=os.path.join(project_dir, ".env"))

from adsflow.core.config import settings, validate_config  # noqa: E402
from adsflow.core.logging import configure_logging  # noqa: E402
from adsflow.core.middleware.request_id import RequestIdMiddleware  # noqa: E402
from adsflow.core.validation import validate_env  # noqa: E402
from adsflow.core.errors import (  # noqa: E402
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from adsflow.api import campaigns, health, usage  # noqa: E402

configure_logging(settings.ENV)
validate_env()
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("adsflow")
    logger.info("Starting Ads Flow backend...")
    try:
        yield
    finally:
        logging.getLogger("adsflow").info("Stopping Ads Flow backend...")


app = FastAPI(title="Ads Flow - Campaign Generator", lifespan=lifespan)

# Middlewares
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "content-type", "x-request-id"],
    expose_headers=["x-request-id", "x-generations-used"],
)

app.include_router(campaigns.router)
app.include_router(usage.router)
app.include_router(health.router)
