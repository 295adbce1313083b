"""
Audience resolution for notification events.

Each resolver turns a school-scoped query into Recipients, one per
student. A recipient carries the parent's phone and/or the parent's
account id; which channels it is eligible for follows from which of the
two is populated.

Resolvers:
    absent_students: Students marked absent on a date
    weekly_attendance: Every student, with present/absent/percentage
    school_students: Every student (emergency and general broadcasts)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from django.db.models import Count, Q

from notifications.channels.base import Recipient
from schools.models import Attendance, Student

if TYPE_CHECKING:
    from datetime import date

    from django.db.models import QuerySet

    from schools.models import School


def _recipient(student: Student, context: dict | None = None) -> Recipient:
    return Recipient(
        name="Parent",
        phone=student.parent_phone or "",
        user_id=student.parent_user_id,
        student_id=student.pk,
        student_name=student.full_name,
        context=context or {},
    )


def _students(school: School, class_name: str | None, section: str | None) -> QuerySet[Student]:
    students = Student.objects.filter(school=school)
    if class_name:
        students = students.filter(class_name=class_name)
    if section:
        students = students.filter(section=section)
    return students


def attendance_percentage(present: int, recorded: int) -> int:
    """Present share of recorded days, rounded half up; 0 with no records."""
    if recorded <= 0:
        return 0
    return math.floor(present * 100 / recorded + 0.5)


def absent_students(
    school: School,
    on_date: date,
    class_name: str | None = None,
    section: str | None = None,
) -> list[Recipient]:
    records = Attendance.objects.filter(
        school=school,
        date=on_date,
        status=Attendance.Status.ABSENT,
    ).select_related("student")
    if class_name:
        records = records.filter(student__class_name=class_name)
    if section:
        records = records.filter(student__section=section)

    return [_recipient(record.student) for record in records.order_by("student__full_name", "pk")]


def weekly_attendance(
    school: School,
    start: date,
    end: date,
    class_name: str | None = None,
    section: str | None = None,
) -> list[Recipient]:
    """
    Every student with their attendance counts over [start, end].

    Counts come from one aggregate query. Any status other than present
    counts as absent.
    """
    in_period = Q(attendance_records__date__range=(start, end))
    students = _students(school, class_name, section).annotate(
        days_recorded=Count("attendance_records", filter=in_period),
        days_present=Count(
            "attendance_records",
            filter=in_period & Q(attendance_records__status=Attendance.Status.PRESENT),
        ),
    )

    recipients = []
    for student in students.order_by("full_name", "pk"):
        present = student.days_present
        recipients.append(
            _recipient(
                student,
                {
                    "present": present,
                    "absent": student.days_recorded - present,
                    "percentage": attendance_percentage(present, student.days_recorded),
                },
            )
        )
    return recipients


def school_students(
    school: School,
    class_name: str | None = None,
    section: str | None = None,
) -> list[Recipient]:
    return [_recipient(student) for student in _students(school, class_name, section).order_by("full_name", "pk")]
