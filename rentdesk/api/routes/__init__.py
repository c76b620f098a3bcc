from rentdesk.api.routes.auth import router as auth_router
from rentdesk.api.routes.users import router as users_router
from rentdesk.api.routes.properties import router as properties_router
from rentdesk.api.routes.tenants import router as tenants_router
from rentdesk.api.routes.maintenance import router as maintenance_router
from rentdesk.api.routes.payments import router as payments_router
from rentdesk.api.routes.documents import router as documents_router
from rentdesk.api.routes.realtime import router as realtime_router
from rentdesk.api.routes.system import router as system_router

__all__ = [
    "auth_router",
    "users_router",
    "properties_router",
    "tenants_router",
    "maintenance_router",
    "payments_router",
    "documents_router",
    "realtime_router",
    "system_router",
]
