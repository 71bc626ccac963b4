# healthcare/db/models/user.py
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from healthcare.db.base import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash, never serialized
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    patients = relationship("PatientModel", back_populates="owner")
    doctors = relationship("DoctorModel", back_populates="owner")
