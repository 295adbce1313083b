"""
URL configuration for the school operations backend.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - JWT token endpoints
        token/                     - Obtain access/refresh pair
        token/refresh/             - Refresh access token
        me/                        - Current user
    /api/v1/access/                - Module access control
        modules/                   - Module catalog
        me/                        - Caller's access map and modules
        users/{id}/                - Get/replace a user's access map
        users/{id}/grants/         - Upsert one grant
        users/{id}/grants/{module}/ - Remove one grant
        users/{id}/grant-all/      - Grant full access
        users/{id}/revoke-all/     - Revoke all access
        users/{id}/provision-defaults/ - Apply role defaults
    /api/v1/notifications/         - Notifications
        (list/create)              - Own notifications / send in-app
        unread-count/              - Unread badge count
        {id}/read/                 - Mark one as read
        read/                      - Mark several as read
        read-all/                  - Mark all as read
        delete/                    - Delete several
        sms/                       - Send SMS batch
        sms/logs/                  - SMS delivery history
        dispatch/                  - Dispatch any notification event
        trigger-attendance/        - Attendance alerts and weekly reports
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("access/", include("access.urls")),
    path("notifications/", include("notifications.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "School Operations Admin"
admin.site.site_title = "School Operations"
admin.site.index_title = "Access and notifications"
