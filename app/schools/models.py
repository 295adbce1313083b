"""
School domain models.

This module defines:
- School: A tenant institution
- Student: Enrolled student with parent contact details
- Attendance: One status per student per day

Students carry their parent's phone and (optionally) the parent's user
account; those are the two addresses notifications are delivered to.
"""

from django.conf import settings
from django.db import models

from core.models import BaseModel


class School(BaseModel):
    """
    A school. Every student and attendance record belongs to one.
    """

    name = models.CharField(
        max_length=255,
        help_text="Display name used in parent messages",
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive schools are skipped by scheduled reports",
    )

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Student(BaseModel):
    """
    An enrolled student.

    Fields:
        school: Owning school
        full_name: Student name used in messages
        class_name: Class/grade identifier (e.g. "7")
        section: Section within the class (e.g. "B")
        parent_phone: Free-form phone, normalized at send time
        parent_email: Parent contact email
        parent_user: Parent's account, if they have one (in-app target)
    """

    school = models.ForeignKey(
        School,
        on_delete=models.CASCADE,
        related_name="students",
    )
    full_name = models.CharField(max_length=255)
    class_name = models.CharField(max_length=50, blank=True, db_index=True)
    section = models.CharField(max_length=20, blank=True)
    parent_phone = models.CharField(max_length=20, blank=True)
    parent_email = models.EmailField(blank=True)
    parent_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
        help_text="Parent account that receives in-app notifications",
    )

    class Meta:
        ordering = ["full_name"]
        indexes = [
            models.Index(
                fields=["school", "class_name", "section"],
                name="student_school_class_idx",
            ),
        ]

    def __str__(self):
        return self.full_name


class Attendance(BaseModel):
    """
    Daily attendance status for a student.
    """

    class Status(models.TextChoices):
        PRESENT = "present", "Present"
        ABSENT = "absent", "Absent"
        LATE = "late", "Late"
        EXCUSED = "excused", "Excused"

    school = models.ForeignKey(
        School,
        on_delete=models.CASCADE,
        related_name="attendance_records",
    )
    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name="attendance_records",
    )
    date = models.DateField(db_index=True)
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PRESENT,
    )

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(
                fields=["student", "date"],
                name="unique_attendance_per_student_per_day",
            ),
        ]
        indexes = [
            models.Index(
                fields=["school", "date", "status"],
                name="attendance_school_date_idx",
            ),
        ]

    def __str__(self):
        return f"{self.student} {self.date} {self.status}"
