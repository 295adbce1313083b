"""
Notifications app for parent-facing school notifications.

This app provides:
- Notification model for in-app notifications, SmsDeliveryLog for SMS history
- SMS providers (Twilio, MSG91) behind one registry
- SMS and in-app channels with per-recipient delivery results
- NotificationOrchestrator for absence, weekly report, emergency and general events
- Celery tasks for async dispatch and the weekly fan-out
- REST API for the inbox, SMS sending and event dispatch

Usage:
    from notifications.orchestrator import NotificationEvent, NotificationOrchestrator

    summary = NotificationOrchestrator.dispatch(
        NotificationEvent(event_type="absence_alert", school_id=school.id)
    )
    summary.sms_sent
"""
