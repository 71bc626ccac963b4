from .user import UserModel
from .patient import PatientModel
from .doctor import DoctorModel
from .mapping import PatientDoctorMappingModel

__all__ = [
    "UserModel",
    "PatientModel",
    "DoctorModel",
    "PatientDoctorMappingModel",
]
