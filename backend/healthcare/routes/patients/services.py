import logging
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.auth import Caller
from healthcare.core.errors import Forbidden, NotFound, validate_payload
from healthcare.db.crud.patient import (
    create_patient,
    delete_patient,
    get_patient,
    get_patients_for_owner,
    update_patient,
)
from healthcare.db.models.patient import PatientModel
from healthcare.schemas.patient import PatientCreate, PatientUpdate

logger = logging.getLogger(__name__)


async def get_owned_patient(db: AsyncSession, patient_id: int, caller: Caller) -> PatientModel:
    """Load a patient the caller owns.

    Raises NotFound when the row is absent and Forbidden when it belongs to
    another user.
    """
    patient = await get_patient(db, patient_id)
    if not patient:
        raise NotFound("Patient not found")
    if patient.user_id != caller.id:
        logger.warning(f"User {caller.id} denied access to patient {patient_id}")
        raise Forbidden("Unauthorized access to patient data")
    return patient


async def add_patient(db: AsyncSession, caller: Caller, data: PatientCreate) -> PatientModel:
    return await create_patient(db, caller.id, data.model_dump())


async def list_patients(db: AsyncSession, caller: Caller) -> List[PatientModel]:
    return await get_patients_for_owner(db, caller.id)


async def edit_patient(
    db: AsyncSession, caller: Caller, patient_id: int, payload: Dict[str, Any]
) -> PatientModel:
    patient = await get_owned_patient(db, patient_id, caller)
    changes = validate_payload(PatientUpdate, payload, "Invalid patient data")
    return await update_patient(db, patient, changes.model_dump(exclude_unset=True))


async def remove_patient(db: AsyncSession, caller: Caller, patient_id: int) -> None:
    await get_owned_patient(db, patient_id, caller)
    if not await delete_patient(db, patient_id):
        # deleted by a concurrent request between the ownership check and now
        raise NotFound("Patient not found")
