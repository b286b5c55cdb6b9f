import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

_LOG = logging.getLogger("app.http")


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError):
        # Malformed bodies are a plain client error here, not FastAPI's 422.
        _LOG.info("invalid request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={"detail": "invalid request body", "errors": jsonable_encoder(exc.errors())},
        )
