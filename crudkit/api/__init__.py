"""
FastAPI host integration.
"""

from crudkit.api.errors import register_exception_handlers, service_error_handler

__all__ = ["register_exception_handlers", "service_error_handler"]
