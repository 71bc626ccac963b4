import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.auth import Caller
from healthcare.core.errors import Conflict, Forbidden, NotFound
from healthcare.db.crud.doctor import get_doctor
from healthcare.db.crud.mapping import (
    create_mapping,
    delete_mapping,
    get_mapping,
    get_mapping_by_pair,
    get_mappings,
    get_mappings_by_patient,
)
from healthcare.db.crud.patient import get_patient
from healthcare.db.models.mapping import PatientDoctorMappingModel
from healthcare.schemas.mapping import MappingCreate

logger = logging.getLogger(__name__)


async def assign_doctor(db: AsyncSession, caller: Caller, data: MappingCreate) -> PatientDoctorMappingModel:
    """
    Assign a doctor to a patient.

    Both rows must exist and belong to the caller. Another user's record is
    reported exactly like a missing one so its existence is not revealed.

    Raises:
        NotFound: patient or doctor missing or owned by someone else
        Conflict: the doctor is already assigned to this patient
    """
    patient = await get_patient(db, data.patient_id)
    if not patient or patient.user_id != caller.id:
        raise NotFound("Patient not found or unauthorized")

    doctor = await get_doctor(db, data.doctor_id)
    if not doctor or doctor.user_id != caller.id:
        raise NotFound("Doctor not found or unauthorized")

    if await get_mapping_by_pair(db, data.patient_id, data.doctor_id):
        raise Conflict("Doctor is already assigned to this patient")

    # a concurrent duplicate still fails on the unique constraint inside create_mapping
    return await create_mapping(db, data.model_dump())


async def list_all_mappings(db: AsyncSession) -> List[PatientDoctorMappingModel]:
    # TODO: scope to the caller's patients once the mappings page stops relying on the global list
    return await get_mappings(db)


async def list_patient_mappings(
    db: AsyncSession, caller: Caller, patient_id: int
) -> List[PatientDoctorMappingModel]:
    patient = await get_patient(db, patient_id)
    if not patient or patient.user_id != caller.id:
        raise NotFound("Patient not found or unauthorized")
    return await get_mappings_by_patient(db, patient_id)


async def unassign_doctor(db: AsyncSession, caller: Caller, mapping_id: int) -> None:
    mapping = await get_mapping(db, mapping_id)
    if not mapping:
        raise NotFound("Mapping not found")

    patient = await get_patient(db, mapping.patient_id)
    if not patient or patient.user_id != caller.id:
        logger.warning(f"User {caller.id} denied removal of mapping {mapping_id}")
        raise Forbidden("Unauthorized access to mapping data")

    if not await delete_mapping(db, mapping_id):
        raise NotFound("Mapping not found")
