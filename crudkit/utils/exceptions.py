"""
Typed service errors and the normalization wrapper.

Only these three errors ever cross the service boundary:

    raise InvalidArgumentError("Incorrect / invalid parameters supplied")
    raise NotFoundError("The requested object could not be found")
    raise InternalError(str(error))

Every public service coroutine is wrapped with @normalize_errors, which lets
a ServiceError through untouched and turns anything else into InternalError.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

from fastapi import HTTPException, status

from crudkit.config.constants import ErrorKind, GrpcCodes, Messages
from crudkit.config.logging import get_logger
from crudkit.utils.metadata import Metadata

logger = get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


class ServiceError(HTTPException):
    """
    Base typed error with automatic logging.

    Subclasses HTTPException so a FastAPI host can raise it straight from a
    route; gRPC hosts read `grpc_code` and `metadata` instead.
    """

    kind: ErrorKind
    grpc_code: int

    def __init__(
        self,
        status_code: int,
        message: str,
        metadata: Metadata | None = None,
        log_level: str = "warning",
        **log_context: Any,
    ):
        self.message = message
        self.metadata = metadata

        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(
            message,
            kind=self.kind.value,
            status_code=status_code,
            metadata=metadata.to_dict() if metadata else None,
            **log_context,
        )

        super().__init__(status_code=status_code, detail=message)

    def to_dict(self) -> dict[str, Any]:
        """Wire representation shared by HTTP and gRPC hosts."""
        return {
            "code": self.grpc_code,
            "error": self.kind.value,
            "message": self.message,
            "metadata": self.metadata.to_dict() if self.metadata else {},
        }

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, metadata={self.metadata!r})"


# =============================================================================
# 400 Invalid Argument
# =============================================================================


class InvalidArgumentError(ServiceError):
    """
    Bad input: invalid ID, failed validation, malformed search arguments.

    Usage:
        raise InvalidArgumentError(Messages.VALIDATION_FAILED, metadata)
    """

    kind = ErrorKind.INVALID_ARGUMENT
    grpc_code = GrpcCodes.INVALID_ARGUMENT

    def __init__(
        self,
        message: str = Messages.INVALID_PARAMETERS,
        metadata: Metadata | None = None,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            metadata=metadata,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 404 Not Found
# =============================================================================


class NotFoundError(ServiceError):
    """Single-result lookup found nothing."""

    kind = ErrorKind.NOT_FOUND
    grpc_code = GrpcCodes.NOT_FOUND

    def __init__(
        self,
        message: str = Messages.NOT_FOUND,
        metadata: Metadata | None = None,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=message,
            metadata=metadata,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 500 Internal
# =============================================================================


class InternalError(ServiceError):
    """Anything else, backend failures included."""

    kind = ErrorKind.INTERNAL
    grpc_code = GrpcCodes.INTERNAL

    def __init__(
        self,
        message: str = Messages.INTERNAL,
        metadata: Metadata | None = None,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=message,
            metadata=metadata,
            log_level="error",
            **log_context,
        )


def to_internal_error(error: BaseException, **log_context: Any) -> InternalError:
    """Wrap an untyped error, keeping its message."""
    message = str(error) or type(error).__name__
    internal = InternalError(message, error_type=type(error).__name__, **log_context)
    internal.__cause__ = error
    return internal


def normalize_errors(
    func: Callable[P, Awaitable[R]],
) -> Callable[P, Awaitable[R]]:
    """
    Decorator for service coroutines.

    ServiceError propagates unchanged; any other Exception is re-raised
    as InternalError chained from the original.
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except ServiceError:
            raise
        except Exception as error:
            raise to_internal_error(error, operation=func.__qualname__) from error

    return wrapper
