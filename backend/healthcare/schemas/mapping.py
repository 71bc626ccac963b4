# healthcare/schemas/mapping.py
from datetime import datetime
from typing import Annotated, Optional

from pydantic import Field

from healthcare.config.constants import MAX_RECORD_ID, MappingStatus
from healthcare.schemas.shared import CamelModel


class MappingCreate(CamelModel):
    patient_id: Annotated[int, Field(ge=1, le=MAX_RECORD_ID)]
    doctor_id: Annotated[int, Field(ge=1, le=MAX_RECORD_ID)]
    status: MappingStatus
    notes: Optional[str] = None
    last_visit: Optional[datetime] = None


class MappingOut(CamelModel):
    id: int
    patient_id: int
    doctor_id: int
    status: str
    notes: Optional[str] = None
    assigned_date: datetime
    last_visit: Optional[datetime] = None
    created_at: datetime
