from enum import Enum

class PatientStatus(str, Enum):
    ACTIVE = "Active"
    PENDING = "Pending"
    CRITICAL = "Critical"
    RECOVERED = "Recovered"

class DoctorStatus(str, Enum):
    # the add-doctor and edit-doctor forms use different vocabularies; both are accepted
    AVAILABLE = "Available"
    BUSY = "Busy"
    ON_LEAVE = "On Leave"
    ACTIVE = "Active"
    NOT_AVAILABLE = "Not Available"

class MappingStatus(str, Enum):
    ACTIVE = "Active"
    PENDING = "Pending"
    COMPLETED = "Completed"

# largest value an INTEGER primary key column can hold
MAX_RECORD_ID = 2**31 - 1
