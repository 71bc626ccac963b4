"""Error taxonomy shared by the service layer and the persistence gateway.

Services raise these, never ``HTTPException``. The handlers registered in
``healthcare.main`` turn them into the JSON envelope
``{"code", "message"[, "errors"]}``.
"""
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class AppError(Exception):
    code: str = "error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class InvalidPayload(AppError):
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Unauthorized(AppError):
    code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class InvalidCredentials(AppError):
    code = "invalid_credentials"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class Forbidden(AppError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(AppError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InvalidReference(AppError):
    code = "invalid_reference"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Referenced record does not exist"


class Unavailable(AppError):
    code = "unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database unavailable"


def translate_integrity_error(exc: IntegrityError, conflict_message: str) -> AppError:
    """Map a constraint violation raised by the store onto the taxonomy."""
    text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    if "foreign key" in text:
        return InvalidReference()
    if "not null" in text or "null value" in text:
        return InvalidPayload("A required field is missing")
    return Conflict(conflict_message)


def field_errors(exc: Union[RequestValidationError, PydanticValidationError]) -> List[Dict[str, Any]]:
    errors = []
    for err in exc.errors():
        # drop the "body"/"path" prefix FastAPI puts in front of the field name
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        errors.append({"field": ".".join(loc) or None, "message": err.get("msg", "")})
    return errors


# -------------------------------------------------------------------------------------
# Exception handlers
# -------------------------------------------------------------------------------------
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InvalidPayload("Invalid input", errors=field_errors(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Store unavailable during {request.method} {request.url.path}: {exc}")
    error = Unavailable()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error during {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": "internal_error", "message": "Internal server error"},
    )


STORE_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


def validate_payload(model_cls: Type[ModelT], payload: Any, message: str) -> ModelT:
    """Validate ``payload`` against ``model_cls``, raising InvalidPayload with field errors."""
    try:
        return model_cls.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidPayload(message, errors=field_errors(e)) from e
