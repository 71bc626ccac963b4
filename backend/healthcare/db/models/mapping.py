# healthcare/db/models/mapping.py
from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    String,
    Text,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from healthcare.db.base import Base
from sqlalchemy.sql import func


class PatientDoctorMappingModel(Base):
    __tablename__ = "patient_doctor_mappings"

    id = Column(Integer, primary_key=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False)  # Active, Pending, Completed
    notes = Column(Text, nullable=True)
    assigned_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_visit = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # A doctor is assigned to a given patient at most once
    __table_args__ = (
        UniqueConstraint("patient_id", "doctor_id", name="uq_patient_doctor_mappings_pair"),
    )

    patient = relationship("PatientModel", back_populates="mappings")
    doctor = relationship("DoctorModel", back_populates="mappings")
