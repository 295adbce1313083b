from django.contrib import admin

from schools.models import Attendance, School, Student


@admin.register(School)
class SchoolAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("full_name", "school", "class_name", "section", "parent_phone")
    list_filter = ("school", "class_name")
    search_fields = ("full_name", "parent_phone", "parent_email")
    raw_id_fields = ("parent_user",)


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("student", "school", "date", "status")
    list_filter = ("status", "date", "school")
    date_hierarchy = "date"
    raw_id_fields = ("student",)
