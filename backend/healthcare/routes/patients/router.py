from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.auth import Caller
from healthcare.core.middleware import get_current_user, get_db
from healthcare.routes.patients.services import (
    add_patient,
    edit_patient,
    get_owned_patient,
    list_patients,
    remove_patient,
)
from healthcare.schemas.patient import PatientCreate, PatientOut
from healthcare.schemas.shared import ERROR_RESPONSES, MessageResponse, PathId

router = APIRouter(prefix="/api/patients", tags=["patients"], responses=ERROR_RESPONSES)


@router.post("", response_model=PatientOut, status_code=status.HTTP_201_CREATED)
async def create_patient_route(
    patient: PatientCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Add a new patient owned by the current user"""
    return await add_patient(db, caller, patient)


@router.get("", response_model=List[PatientOut])
async def list_patients_route(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Retrieve all patients created by the current user"""
    return await list_patients(db, caller)


@router.get("/{patient_id}", response_model=PatientOut)
async def get_patient_route(
    patient_id: PathId,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    return await get_owned_patient(db, patient_id, caller)


@router.put("/{patient_id}", response_model=PatientOut)
async def update_patient_route(
    patient_id: PathId,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Partially update a patient; only the supplied fields change"""
    return await edit_patient(db, caller, patient_id, payload)


@router.delete("/{patient_id}", response_model=MessageResponse)
async def delete_patient_route(
    patient_id: PathId,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Delete a patient and every doctor assignment it has"""
    await remove_patient(db, caller, patient_id)
    return MessageResponse(message="Patient deleted successfully")
