"""
URL configuration for access app.

Routes:
    /api/v1/access/modules/    - Module catalog
    /api/v1/access/me/         - Caller's access
    /api/v1/access/users/...   - SUPER_ADMIN management (UserAccessViewSet)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from access.views import ModuleCatalogView, MyAccessView, UserAccessViewSet

app_name = "access"

router = DefaultRouter()
router.register(r"users", UserAccessViewSet, basename="user-access")

urlpatterns = [
    path("modules/", ModuleCatalogView.as_view(), name="modules"),
    path("me/", MyAccessView.as_view(), name="me"),
    path("", include(router.urls)),
]
