# healthcare/db/crud/patient.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.errors import translate_integrity_error
from healthcare.db.models import PatientDoctorMappingModel, PatientModel

logger = logging.getLogger(__name__)


async def get_patient(db: AsyncSession, patient_id: int) -> Optional[PatientModel]:
    return await db.get(PatientModel, patient_id)


async def get_patients_for_owner(db: AsyncSession, user_id: int) -> List[PatientModel]:
    """All patients recorded by ``user_id``, oldest first."""
    result = await db.execute(
        select(PatientModel).where(PatientModel.user_id == user_id).order_by(PatientModel.id)
    )
    return list(result.scalars().all())


async def create_patient(db: AsyncSession, user_id: int, data: Dict[str, Any]) -> PatientModel:
    patient = PatientModel(**{**data, "user_id": user_id})
    db.add(patient)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise translate_integrity_error(e, "Patient could not be saved") from e

    await db.refresh(patient)
    logger.info(f"CRUD: created patient {patient.id} for user {user_id}")
    return patient


async def update_patient(db: AsyncSession, patient: PatientModel, data: Dict[str, Any]) -> PatientModel:
    """Apply only the supplied fields to ``patient``."""
    if not data:
        return patient
    for field, value in data.items():
        setattr(patient, field, value)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise translate_integrity_error(e, "Patient could not be saved") from e

    await db.refresh(patient)
    logger.info(f"CRUD: updated patient {patient.id} fields={sorted(data)}")
    return patient


async def delete_patient(db: AsyncSession, patient_id: int) -> bool:
    """
    Delete a patient together with every mapping that references it.

    Mappings go first, then the patient row, in a single transaction.

    Returns:
        True if the patient was deleted, False if it wasn't found
    """
    mappings = await db.execute(
        delete(PatientDoctorMappingModel).where(PatientDoctorMappingModel.patient_id == patient_id)
    )
    result = await db.execute(delete(PatientModel).where(PatientModel.id == patient_id))
    await db.commit()
    # rows loaded earlier in this session are gone from the store now
    db.expunge_all()

    deleted = result.rowcount > 0
    logger.info(
        f"CRUD: deleted patient {patient_id} (found={deleted}) and {mappings.rowcount} mappings"
    )
    return deleted
