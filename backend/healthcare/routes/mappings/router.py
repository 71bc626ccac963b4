from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.auth import Caller
from healthcare.core.middleware import get_current_user, get_db
from healthcare.routes.mappings.services import (
    assign_doctor,
    list_all_mappings,
    list_patient_mappings,
    unassign_doctor,
)
from healthcare.schemas.mapping import MappingCreate, MappingOut
from healthcare.schemas.shared import ERROR_RESPONSES, MessageResponse, PathId

router = APIRouter(prefix="/api/mappings", tags=["mappings"], responses=ERROR_RESPONSES)


@router.post("", response_model=MappingOut, status_code=status.HTTP_201_CREATED)
async def create_mapping_route(
    mapping: MappingCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Assign a doctor to a patient"""
    return await assign_doctor(db, caller, mapping)


@router.get("", response_model=List[MappingOut])
async def list_mappings_route(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    return await list_all_mappings(db)


@router.get("/{patient_id}", response_model=List[MappingOut])
async def list_patient_mappings_route(
    patient_id: PathId,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Get the doctor assignments of one of the caller's patients"""
    return await list_patient_mappings(db, caller, patient_id)


@router.delete("/{mapping_id}", response_model=MessageResponse)
async def delete_mapping_route(
    mapping_id: PathId,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Remove a doctor from a patient"""
    await unassign_doctor(db, caller, mapping_id)
    return MessageResponse(message="Mapping deleted successfully")
