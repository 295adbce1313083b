from django.contrib import admin

from access.models import ModuleAccess
from access.services import AccessPolicyService


@admin.register(ModuleAccess)
class ModuleAccessAdmin(admin.ModelAdmin):
    """
    Admin configuration for ModuleAccess.

    Saves and deletes drop the user's cached access map.
    """

    list_display = ("user", "module_name", "access_type", "sub_domain", "updated_at")
    list_filter = ("access_type", "module_name")
    search_fields = ("user__email", "module_name")
    raw_id_fields = ("user",)

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        AccessPolicyService.invalidate(obj.user_id)

    def delete_model(self, request, obj):
        user_id = obj.user_id
        super().delete_model(request, obj)
        AccessPolicyService.invalidate(user_id)
