# backend/sos911/db/models/__init__.py

from sos911.db.models.user import User
from sos911.db.models.medical_info import MedicalInfo
from sos911.db.models.emergency_contact import EmergencyContact
from sos911.db.models.vehicle import Vehicle, VehicleInsurance
from sos911.db.models.address import Address
from sos911.db.models.bank_account import BankAccount
from sos911.db.models.insurance import HealthInsurance, SupplementaryInsurance
from sos911.db.models.emergency_event import EmergencyEvent
from sos911.db.models.validation_question import ValidationQuestion
