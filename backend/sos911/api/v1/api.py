"""Module: api."""

# backend/sos911/api/v1/api.py
from fastapi import APIRouter

# Core operational routes (health/auth/users).
from sos911.api.v1.routes.health import router as health_router
from sos911.api.v1.routes.auth import router as auth_router
from sos911.api.v1.routes.users import router as users_router

# Owned resources, one router per table.
from sos911.api.v1.routes.medical_info import router as medical_info_router
from sos911.api.v1.routes.emergency_contacts import router as emergency_contacts_router
from sos911.api.v1.routes.vehicles import router as vehicles_router
from sos911.api.v1.routes.vehicle_insurance import router as vehicle_insurance_router
from sos911.api.v1.routes.addresses import router as addresses_router
from sos911.api.v1.routes.bank_accounts import router as bank_accounts_router
from sos911.api.v1.routes.health_insurance import router as health_insurance_router
from sos911.api.v1.routes.supplementary_insurance import router as supplementary_insurance_router
from sos911.api.v1.routes.emergency_events import router as emergency_events_router
from sos911.api.v1.routes.validation_questions import router as validation_questions_router

# Outbound integrations.
from sos911.api.v1.routes.whatsapp import router as whatsapp_router
from sos911.api.v1.routes.agent import router as agent_router


api_router = APIRouter()

# Register operational endpoints first for service-level concerns.
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])

# Register resource endpoints consumed by the mobile app and voice agent.
api_router.include_router(medical_info_router, prefix="/medical-info", tags=["medical-info"])
api_router.include_router(emergency_contacts_router, prefix="/emergency-contacts", tags=["emergency-contacts"])
api_router.include_router(vehicles_router, prefix="/vehicles", tags=["vehicles"])
api_router.include_router(vehicle_insurance_router, prefix="/vehicle-insurance", tags=["vehicle-insurance"])
api_router.include_router(addresses_router, prefix="/addresses", tags=["addresses"])
api_router.include_router(bank_accounts_router, prefix="/bank-accounts", tags=["bank-accounts"])
api_router.include_router(health_insurance_router, prefix="/health-insurance", tags=["health-insurance"])
api_router.include_router(
    supplementary_insurance_router, prefix="/supplementary-insurance", tags=["supplementary-insurance"]
)
api_router.include_router(emergency_events_router, prefix="/emergency-events", tags=["emergency-events"])
api_router.include_router(validation_questions_router, tags=["validation-questions"])

# Register outbound integration endpoints.
api_router.include_router(whatsapp_router, prefix="/whatsapp", tags=["whatsapp"])
api_router.include_router(agent_router, prefix="/agent", tags=["agent"])
