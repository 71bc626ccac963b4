# healthcare/db/crud/mapping.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.errors import translate_integrity_error
from healthcare.db.models import PatientDoctorMappingModel

logger = logging.getLogger(__name__)


async def get_mapping(db: AsyncSession, mapping_id: int) -> Optional[PatientDoctorMappingModel]:
    return await db.get(PatientDoctorMappingModel, mapping_id)


async def get_mappings(db: AsyncSession) -> List[PatientDoctorMappingModel]:
    """Every mapping in the store, regardless of owner."""
    result = await db.execute(select(PatientDoctorMappingModel).order_by(PatientDoctorMappingModel.id))
    return list(result.scalars().all())


async def get_mappings_by_patient(db: AsyncSession, patient_id: int) -> List[PatientDoctorMappingModel]:
    result = await db.execute(
        select(PatientDoctorMappingModel)
        .where(PatientDoctorMappingModel.patient_id == patient_id)
        .order_by(PatientDoctorMappingModel.id)
    )
    return list(result.scalars().all())


async def get_mapping_by_pair(
    db: AsyncSession, patient_id: int, doctor_id: int
) -> Optional[PatientDoctorMappingModel]:
    result = await db.execute(
        select(PatientDoctorMappingModel).where(
            and_(
                PatientDoctorMappingModel.patient_id == patient_id,
                PatientDoctorMappingModel.doctor_id == doctor_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def create_mapping(db: AsyncSession, data: Dict[str, Any]) -> PatientDoctorMappingModel:
    """
    Insert a mapping row; ``assigned_date`` is always the creation time.

    Raises:
        Conflict: the (patient_id, doctor_id) pair already exists
        InvalidReference: patient or doctor row is missing
    """
    mapping = PatientDoctorMappingModel(
        **{**data, "assigned_date": datetime.now(timezone.utc)}
    )
    db.add(mapping)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info(
            f"CRUD: mapping insert rejected for patient {data.get('patient_id')} / doctor {data.get('doctor_id')}"
        )
        raise translate_integrity_error(e, "Doctor is already assigned to this patient") from e

    await db.refresh(mapping)
    logger.info(f"CRUD: created mapping {mapping.id}")
    return mapping


async def delete_mapping(db: AsyncSession, mapping_id: int) -> bool:
    result = await db.execute(
        delete(PatientDoctorMappingModel).where(PatientDoctorMappingModel.id == mapping_id)
    )
    await db.commit()
    db.expunge_all()
    return result.rowcount > 0
