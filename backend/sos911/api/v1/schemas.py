"""Module: schemas.

Response payloads shared by several routers, plus the base class for
partial-update request bodies.
"""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, model_validator


# Request bodies trim surrounding whitespace on every string field.
class RequestModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class PartialUpdate(RequestModel):
    """
    Request body where every field is optional.

    Omitted fields are left untouched; an explicit ``null`` clears a nullable
    column. Fields listed in ``required_fields`` map to NOT NULL columns and
    reject ``null``.
    """

    required_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in sorted(self.required_fields & self.model_fields_set):
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class OrmPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserSummaryPayload(OrmPayload):
    id: str
    email: str
    full_name: str
    phone_number: str | None = None
    rut: str | None = None
    profile_picture_url: str | None = None
    created_at: datetime
    updated_at: datetime


class MedicalInfoPayload(OrmPayload):
    id: str
    user_id: str
    medical_conditions: list[str]
    allergies: list[str]
    medications: list[str]
    blood_type: str | None = None
    emergency_notes: str | None = None
    voice_password_hash: str | None = None
    created_at: datetime
    updated_at: datetime


class EmergencyContactPayload(OrmPayload):
    id: str
    user_id: str
    contact_name: str
    phone_number: str
    relationship: str
    email: str | None = None
    created_at: datetime
    updated_at: datetime


class VehicleInsurancePayload(OrmPayload):
    id: str
    vehicle_id: str
    insurance_company: str
    policy_number: str
    coverage_type: str
    expiration_date: datetime
    phone_insurance: str
    claim_process_info: str | None = None
    created_at: datetime
    updated_at: datetime


class VehiclePayload(OrmPayload):
    id: str
    user_id: str
    license_plate: str
    brand: str
    model: str
    year: int
    color: str
    vin: str | None = None
    vehicle_type: str
    created_at: datetime
    updated_at: datetime


class VehicleWithInsurancePayload(VehiclePayload):
    vehicle_insurance: list[VehicleInsurancePayload] = []


class AddressPayload(OrmPayload):
    id: str
    user_id: str
    street_address: str
    city: str
    region: str
    postal_code: str | None = None
    country: str
    address_type: str
    is_primary: bool
    created_at: datetime
    updated_at: datetime


class BankAccountPayload(OrmPayload):
    id: str
    user_id: str
    bank_name: str
    account_type: str
    account_number: str
    rut: str
    created_at: datetime
    updated_at: datetime


class HealthInsurancePayload(OrmPayload):
    id: str
    user_id: str
    primary_provider: bool
    provider_name: str
    plan_name: str | None = None
    member_id: str
    coverage_info: str | None = None
    created_at: datetime
    updated_at: datetime


class SupplementaryInsurancePayload(OrmPayload):
    id: str
    user_id: str
    insurance_type: str
    insurance_company: str
    policy_number: str
    coverage_info: str | None = None
    created_at: datetime
    updated_at: datetime


class EventUserPayload(OrmPayload):
    id: str
    full_name: str
    email: str
    phone_number: str | None = None


class EmergencyEventPayload(OrmPayload):
    id: str
    user_id: str
    event_type: str
    description: str
    location: str
    audio_recording_url: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime
    user: EventUserPayload | None = None


class ValidationQuestionPayload(OrmPayload):
    id: str
    question: str
    created_at: datetime
    updated_at: datetime


# User with every owned collection, as returned by profile endpoints.
class UserDetailPayload(UserSummaryPayload):
    medical_info: MedicalInfoPayload | None = None
    emergency_contacts: list[EmergencyContactPayload] = []
    vehicles: list[VehicleWithInsurancePayload] = []
    addresses: list[AddressPayload] = []
    bank_accounts: list[BankAccountPayload] = []
    health_insurance: list[HealthInsurancePayload] = []
    supplementary_insurance: list[SupplementaryInsurancePayload] = []
    emergency_events: list[EmergencyEventPayload] = []


# Body of endpoints that act on "the caller, or the user a service names".
class TargetUserRequest(RequestModel):
    user_id: str | None = None
