from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.auth import Caller
from healthcare.core.middleware import get_current_user, get_db
from healthcare.routes.doctors.services import (
    add_doctor,
    edit_doctor,
    get_owned_doctor,
    list_doctors,
    remove_doctor,
)
from healthcare.schemas.doctor import DoctorCreate, DoctorOut
from healthcare.schemas.shared import ERROR_RESPONSES, MessageResponse, PathId

router = APIRouter(prefix="/api/doctors", tags=["doctors"], responses=ERROR_RESPONSES)


@router.post("", response_model=DoctorOut, status_code=status.HTTP_201_CREATED)
async def create_doctor_route(
    doctor: DoctorCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    return await add_doctor(db, caller, doctor)


@router.get("", response_model=List[DoctorOut])
async def list_doctors_route(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Retrieve the doctors recorded by the current user"""
    return await list_doctors(db, caller)


@router.get("/{doctor_id}", response_model=DoctorOut)
async def get_doctor_route(
    doctor_id: PathId,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    return await get_owned_doctor(db, doctor_id, caller)


@router.put("/{doctor_id}", response_model=DoctorOut)
async def update_doctor_route(
    doctor_id: PathId,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    return await edit_doctor(db, caller, doctor_id, payload)


@router.delete("/{doctor_id}", response_model=MessageResponse)
async def delete_doctor_route(
    doctor_id: PathId,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Delete a doctor; its patient assignments are removed first"""
    await remove_doctor(db, caller, doctor_id)
    return MessageResponse(message="Doctor deleted successfully")
