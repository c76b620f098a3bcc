from rentdesk.services import (  # noqa: F401
    analytics_service,
    auth_service,
    lifecycle,
    payment_service,
    property_service,
    tenancy_service,
)
