from app.db.models.user import AccountModel
from app.db.models.patient import PatientModel
from app.db.models.doctor import DoctorModel
from app.db.models.daily import HabitModel, VitalModel
from app.db.models.link import DoctorPatientLinkModel

__all__ = [
    "AccountModel",
    "PatientModel",
    "DoctorModel",
    "HabitModel",
    "VitalModel",
    "DoctorPatientLinkModel",
]
