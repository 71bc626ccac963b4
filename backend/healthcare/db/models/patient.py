# healthcare/db/models/patient.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from healthcare.db.base import Base

class PatientModel(Base):
    __tablename__ = "patients"

    id         = Column(Integer, primary_key=True)
    user_id    = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    first_name = Column(String(100), nullable=False)
    last_name  = Column(String(100), nullable=False)
    email      = Column(String, nullable=False)
    phone      = Column(String(30), nullable=False)
    age        = Column(Integer, nullable=False)
    gender     = Column(String(20), nullable=False)
    status     = Column(String(20), nullable=False)  # Active, Pending, Critical, Recovered
    medical_notes = Column(Text)
    last_visit = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    owner = relationship("UserModel", back_populates="patients")
    mappings = relationship("PatientDoctorMappingModel", back_populates="patient", passive_deletes=True)
