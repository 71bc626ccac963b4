# healthcare/schemas/patient.py
from datetime import datetime
from typing import Annotated, Optional

from pydantic import EmailStr, Field, model_validator

from healthcare.config.constants import PatientStatus
from healthcare.schemas.shared import CamelModel, reject_explicit_nulls

Name = Annotated[str, Field(min_length=2, max_length=100)]
Phone = Annotated[str, Field(min_length=10, max_length=30)]
Age = Annotated[int, Field(gt=0, le=150)]
Gender = Annotated[str, Field(min_length=1, max_length=20)]


class PatientCreate(CamelModel):
    # any userId in the payload is ignored; ownership comes from the caller
    first_name: Name
    last_name: Name
    email: EmailStr
    phone: Phone
    age: Age
    gender: Gender
    status: PatientStatus
    medical_notes: Optional[str] = None
    last_visit: Optional[datetime] = None


class PatientUpdate(CamelModel):
    first_name: Optional[Name] = None
    last_name: Optional[Name] = None
    email: Optional[EmailStr] = None
    phone: Optional[Phone] = None
    age: Optional[Age] = None
    gender: Optional[Gender] = None
    status: Optional[PatientStatus] = None
    medical_notes: Optional[str] = None
    last_visit: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _required_columns_not_null(cls, values):
        return reject_explicit_nulls(
            values, ["first_name", "last_name", "email", "phone", "age", "gender", "status"]
        )


class PatientOut(CamelModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    age: int
    gender: str
    status: str
    medical_notes: Optional[str] = None
    last_visit: Optional[datetime] = None
    created_at: datetime
