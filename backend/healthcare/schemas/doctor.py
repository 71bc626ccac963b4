# healthcare/schemas/doctor.py
from datetime import datetime
from typing import Annotated, Optional

from pydantic import EmailStr, Field, model_validator

from healthcare.config.constants import DoctorStatus
from healthcare.schemas.shared import CamelModel, reject_explicit_nulls

Title = Annotated[str, Field(min_length=1, max_length=20)]
Name = Annotated[str, Field(min_length=2, max_length=100)]
Phone = Annotated[str, Field(min_length=10, max_length=30)]
Specialty = Annotated[str, Field(min_length=1, max_length=100)]
Qualification = Annotated[str, Field(min_length=2, max_length=255)]
Experience = Annotated[int, Field(ge=0, le=80)]


class DoctorCreate(CamelModel):
    title: Title
    name: Name
    email: EmailStr
    phone: Phone
    specialty: Specialty
    qualification: Qualification
    status: DoctorStatus
    bio: Optional[str] = None
    years_of_experience: Optional[Experience] = None
    education: Optional[str] = None


class DoctorUpdate(CamelModel):
    title: Optional[Title] = None
    name: Optional[Name] = None
    email: Optional[EmailStr] = None
    phone: Optional[Phone] = None
    specialty: Optional[Specialty] = None
    qualification: Optional[Qualification] = None
    status: Optional[DoctorStatus] = None
    bio: Optional[str] = None
    years_of_experience: Optional[Experience] = None
    education: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _required_columns_not_null(cls, values):
        return reject_explicit_nulls(
            values,
            ["title", "name", "email", "phone", "specialty", "qualification", "status"],
        )


class DoctorOut(CamelModel):
    id: int
    user_id: int
    title: str
    name: str
    email: str
    phone: str
    specialty: str
    qualification: str
    status: str
    bio: Optional[str] = None
    years_of_experience: Optional[int] = None
    education: Optional[str] = None
    created_at: datetime
