import logging
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from utils.errors import InventoryError

logger = logging.getLogger(__name__)


def _describe(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        parts = list(error.get("loc", ()))
        if parts and parts[0] == "body":
            parts = parts[1:]
        prefix = ""
        # list bodies (bulk rows) are indexed from 0; report 1-based rows
        if parts and isinstance(parts[0], int):
            prefix = f"row {parts[0] + 1}: "
            parts = parts[1:]
        location = ".".join(str(part) for part in parts)
        message = f"{location}: {error.get('msg')}" if location else error.get("msg")
        messages.append(prefix + message)
    return "; ".join(messages) or "Invalid request"


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(InventoryError)
    async def inventory_exception_handler(request: Request, exc: InventoryError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(content={"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            content={"error": str(exc.detail)},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(content={"error": _describe(exc)}, status_code=400)
