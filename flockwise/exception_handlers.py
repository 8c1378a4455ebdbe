import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException

from flockwise.exceptions import FarmError

logger = logging.getLogger("errors")


def _error_response(status_code: int, message: str, details=None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(content=jsonable_encoder(content), status_code=status_code)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, "Validation failed", details=exc.errors())

    @app.exception_handler(FarmError)
    async def farm_error_handler(request: Request, exc: FarmError):
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        # psycopg2 exposes the SQLSTATE as pgcode; other drivers only have a message
        code = getattr(exc.orig, "pgcode", None) or str(exc.orig)
        logger.warning(f"{request.method} {request.url.path} conflict: {code}")
        return _error_response(409, "Record conflicts with an existing one", details=code)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(500, "Internal server error")
