from __future__ import annotations
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: Annotated[str, Field(min_length=6, max_length=128)]
