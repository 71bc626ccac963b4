# healthcare/db/crud/doctor.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.errors import translate_integrity_error
from healthcare.db.models import DoctorModel, PatientDoctorMappingModel

logger = logging.getLogger(__name__)


async def get_doctor(db: AsyncSession, doctor_id: int) -> Optional[DoctorModel]:
    """Fetches a doctor by primary key."""
    return await db.get(DoctorModel, doctor_id)


async def get_doctors_for_owner(db: AsyncSession, user_id: int) -> List[DoctorModel]:
    result = await db.execute(
        select(DoctorModel).where(DoctorModel.user_id == user_id).order_by(DoctorModel.id)
    )
    doctors = list(result.scalars().all())
    logger.debug(f"CRUD: found {len(doctors)} doctors for user {user_id}")
    return doctors


async def create_doctor(db: AsyncSession, user_id: int, data: Dict[str, Any]) -> DoctorModel:
    doctor = DoctorModel(**{**data, "user_id": user_id})
    db.add(doctor)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise translate_integrity_error(e, "Doctor could not be saved") from e

    await db.refresh(doctor)
    logger.info(f"CRUD: created doctor {doctor.id} for user {user_id}")
    return doctor


async def update_doctor(db: AsyncSession, doctor: DoctorModel, data: Dict[str, Any]) -> DoctorModel:
    if not data:
        return doctor
    for field, value in data.items():
        setattr(doctor, field, value)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise translate_integrity_error(e, "Doctor could not be saved") from e

    await db.refresh(doctor)
    logger.info(f"CRUD: updated doctor {doctor.id} fields={sorted(data)}")
    return doctor


async def delete_doctor(db: AsyncSession, doctor_id: int) -> bool:
    """
    Delete a doctor and, before it, every mapping assigning that doctor.

    Returns:
        True if the doctor was deleted, False if it wasn't found
    """
    mappings = await db.execute(
        delete(PatientDoctorMappingModel).where(PatientDoctorMappingModel.doctor_id == doctor_id)
    )
    result = await db.execute(delete(DoctorModel).where(DoctorModel.id == doctor_id))
    await db.commit()
    db.expunge_all()

    deleted = result.rowcount > 0
    logger.info(
        f"CRUD: deleted doctor {doctor_id} (found={deleted}) and {mappings.rowcount} mappings"
    )
    return deleted
