import logging

import pendulum
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .crud import MemoryUserDirectory
from .database import SheetsStore
from .errors import AppError
from .routes import router

logger = logging.getLogger(__name__)

# Friendly messages for request validation failures, by field
FIELD_MESSAGES = {
    "name": "Name is required",
    "email": "Valid email is required",
    "phone": "Valid 10-digit Indian phone number required",
    "quantity": "Quantity must be at least 1",
    "notes": f"Notes must be under {config.NOTES_MAX_LENGTH} characters",
    "password": "Password required",
    "product_name": "Product name required",
    "category": "Category required",
    "price": "Valid price required",
    "googleId": "Google ID is required",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _server_message(message: str) -> str:
    # Details stay out of production responses
    return "Something went wrong" if config.is_production() else message


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(exc.status_code, _server_message(exc.message))
    return _error(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _error(404, "Endpoint not found")
    return _error(exc.status_code, str(exc.detail))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        field = str(error["loc"][-1]) if error.get("loc") else ""
        message = FIELD_MESSAGES.get(field, error.get("msg", "Invalid value"))
        if message not in errors:
            errors.append(message)
    return JSONResponse(status_code=400, content={"success": False, "errors": errors})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, _server_message(str(exc)))


def create_app(store=None, user_directory=None) -> FastAPI:
    app = FastAPI(title="FireGuard API", version=config.API_VERSION)

    app.state.store = store if store is not None else SheetsStore.from_env()
    app.state.user_directory = user_directory or MemoryUserDirectory()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/api/health")
    def health():
        return {
            "status": "ok",
            "timestamp": pendulum.now("UTC").to_iso8601_string(),
            "version": config.API_VERSION,
        }

    app.include_router(router)
    return app


logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

app = create_app()


def run():
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run("fireguard_api.main:app", host=config.HOST, port=config.PORT)
