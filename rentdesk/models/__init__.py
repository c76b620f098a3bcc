# Import all models in correct order to avoid circular imports
from rentdesk.models.user import User, UserRole, user_properties
from rentdesk.models.property import Property, PropertyStatus, PropertyType
from rentdesk.models.tenant import Tenant, TenantStatus, ContactMethod
from rentdesk.models.maintenance import (
    MaintenanceRequest, MaintenanceStatus, MaintenancePriority,
    MaintenanceCategory, RecurrenceFrequency,
)
from rentdesk.models.payment import Payment, PaymentStatus, PaymentType, PaymentMethod, ReminderMethod
from rentdesk.models.document import (
    Document, DocumentType, DocumentCategory, DocumentPermission, AuditAction,
)

__all__ = [
    "User",
    "UserRole",
    "user_properties",
    "Property",
    "PropertyStatus",
    "PropertyType",
    "Tenant",
    "TenantStatus",
    "ContactMethod",
    "MaintenanceRequest",
    "MaintenanceStatus",
    "MaintenancePriority",
    "MaintenanceCategory",
    "RecurrenceFrequency",
    "Payment",
    "PaymentStatus",
    "PaymentType",
    "PaymentMethod",
    "ReminderMethod",
    "Document",
    "DocumentType",
    "DocumentCategory",
    "DocumentPermission",
    "AuditAction",
]
