# healthcare/schemas/shared.py
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from fastapi import Path
from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel

from healthcare.config.constants import MAX_RECORD_ID

# ids outside this range can never match a row; rejected as bad input
PathId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]


class CamelModel(BaseModel):
    """Base for every API schema: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class UserOut(CamelModel):
    id: int
    name: str
    email: EmailStr
    created_at: datetime


class MessageResponse(BaseModel):
    message: str


class FieldError(BaseModel):
    field: Optional[str] = None
    message: str


class ErrorResponse(BaseModel):
    code: str
    message: str
    errors: Optional[List[FieldError]] = None


def reject_explicit_nulls(values: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
    """Partial updates may omit a required field but never null it out."""
    if isinstance(values, dict):
        for name in required:
            for key in (name, to_camel(name)):
                if key in values and values[key] is None:
                    raise ValueError(f"{key} cannot be null")
    return values


# documented on every router; bodies come from healthcare.core.errors
ERROR_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    code: {"model": ErrorResponse}
    for code in (400, 401, 403, 404, 409, 503)
}
