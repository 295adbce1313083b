"""
Celery configuration for the school operations backend.

Celery runs notification dispatches outside the request cycle:
- Absence alerts triggered after attendance is taken
- Weekly attendance reports fanned out to every active school

Redis is both the message broker and result backend. Tasks are
auto-discovered from each installed app's tasks.py.

Usage:
    from notifications.tasks import send_weekly_reports_for_all_schools

    send_weekly_reports_for_all_schools.delay()

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
