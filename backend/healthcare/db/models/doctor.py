# healthcare/db/models/doctor.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from healthcare.db.base import Base

class DoctorModel(Base):
    __tablename__ = "doctors"

    id            = Column(Integer, primary_key=True)
    user_id       = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title         = Column(String(20), nullable=False)   # Dr., Prof., ...
    name          = Column(String(100), nullable=False)
    email         = Column(String, nullable=False)
    phone         = Column(String(30), nullable=False)
    specialty     = Column(String(100), nullable=False)
    qualification = Column(String(255), nullable=False)
    status        = Column(String(20), nullable=False)
    bio           = Column(Text)
    years_of_experience = Column(Integer)
    education     = Column(Text)
    created_at    = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    owner = relationship("UserModel", back_populates="doctors")
    mappings = relationship("PatientDoctorMappingModel", back_populates="doctor", passive_deletes=True)
