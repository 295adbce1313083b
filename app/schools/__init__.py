"""
Schools application.

Minimal school records the notification orchestrator reads: schools,
students with their parent contact details, and daily attendance.
"""
