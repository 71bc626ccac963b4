# healthcare/schemas/register_request.py
from pydantic import BaseModel, EmailStr, Field
from typing import Annotated


class RegisterRequest(BaseModel):
    name:     Annotated[str, Field(min_length=2, max_length=100)]
    email:    EmailStr
    password: Annotated[str, Field(min_length=6, max_length=128)]
