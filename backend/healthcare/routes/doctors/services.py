import logging
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.auth import Caller
from healthcare.core.errors import Forbidden, NotFound, validate_payload
from healthcare.db.crud.doctor import (
    create_doctor,
    delete_doctor,
    get_doctor,
    get_doctors_for_owner,
    update_doctor,
)
from healthcare.db.models.doctor import DoctorModel
from healthcare.schemas.doctor import DoctorCreate, DoctorUpdate

logger = logging.getLogger(__name__)


async def get_owned_doctor(db: AsyncSession, doctor_id: int, caller: Caller) -> DoctorModel:
    doctor = await get_doctor(db, doctor_id)
    if not doctor:
        raise NotFound("Doctor not found")
    if doctor.user_id != caller.id:
        logger.warning(f"User {caller.id} denied access to doctor {doctor_id}")
        raise Forbidden("Unauthorized access to doctor data")
    return doctor


async def add_doctor(db: AsyncSession, caller: Caller, data: DoctorCreate) -> DoctorModel:
    return await create_doctor(db, caller.id, data.model_dump())


async def list_doctors(db: AsyncSession, caller: Caller) -> List[DoctorModel]:
    return await get_doctors_for_owner(db, caller.id)


async def edit_doctor(
    db: AsyncSession, caller: Caller, doctor_id: int, payload: Dict[str, Any]
) -> DoctorModel:
    doctor = await get_owned_doctor(db, doctor_id, caller)
    changes = validate_payload(DoctorUpdate, payload, "Invalid doctor data")
    return await update_doctor(db, doctor, changes.model_dump(exclude_unset=True))


async def remove_doctor(db: AsyncSession, caller: Caller, doctor_id: int) -> None:
    await get_owned_doctor(db, doctor_id, caller)
    if not await delete_doctor(db, doctor_id):
        raise NotFound("Doctor not found")
