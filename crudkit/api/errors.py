"""
FastAPI integration for service errors.

Usage:
    from fastapi import FastAPI
    from crudkit.api import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)

A ServiceError raised from a route is rendered as:

    {"code": 3, "error": "INVALID_ARGUMENT",
     "message": "Validation failed on the provided request",
     "metadata": {"email": ["email must be a valid address"]}}
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from crudkit.utils.exceptions import ServiceError


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a ServiceError with its HTTP status and metadata."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the ServiceError handler on an application."""
    app.add_exception_handler(ServiceError, service_error_handler)
