"""
Root pytest configuration.

Points Django at self-contained test services before anything imports
settings: SQLite instead of PostgreSQL, local-memory cache instead of
Redis, and eager Celery. Real environment variables still win, so CI can
run the suite against PostgreSQL by exporting DATABASE_URL.

DJANGO_SETTINGS_MODULE is set here rather than in the pytest ini options:
pytest-django imports settings as soon as it sees that option, which is
before this file has a chance to supply SECRET_KEY and friends.

Django setup and project-wide fixtures live in app/conftest.py.
"""

import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DEBUG", "False")
os.environ.setdefault("SECURE_SSL_REDIRECT", "False")
os.environ.setdefault("DATABASE_URL", "sqlite:///test.sqlite3")
os.environ.setdefault("CACHE_URL", "locmemcache://")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "True")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("ENV_FILE", "/nonexistent/.env.test")
