from fastapi import APIRouter
from episure.modules.cases.router import router as cases_router
from episure.modules.patients.router import router as patients_router
from episure.modules.medications.router import router as medications_router
from episure.modules.notification_preferences.router import router as notification_preferences_router
from episure.modules.emergency_contacts.router import router as emergency_contacts_router
from episure.modules.invitations.router import router as invitations_router
from episure.modules.users.router import router as users_router
from episure.modules.audit.router import router as audit_router

api_router = APIRouter()
api_router.include_router(cases_router, prefix="/cases", tags=["cases"])
api_router.include_router(patients_router, prefix="/patients", tags=["patients"])
api_router.include_router(medications_router, prefix="/medications", tags=["medications"])
api_router.include_router(notification_preferences_router, prefix="/notification-preferences", tags=["notifications"])
# the routers below declare their own full paths
api_router.include_router(emergency_contacts_router, tags=["emergency-contacts"])
api_router.include_router(invitations_router, tags=["invitations"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(audit_router, tags=["audit"])

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
