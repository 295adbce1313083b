"""
Views for notification API.

ViewSets / Views:
    NotificationViewSet: Caller's inbox and bulk creation
    SmsSendView: Send a templated SMS batch
    SmsLogView: SMS delivery history
    DispatchView: Dispatch any school event
    TriggerAttendanceView: Attendance events, for teachers and the scheduler

Endpoints:
    Inbox:
        GET  /api/v1/notifications/                - List (unread_only, limit)
        POST /api/v1/notifications/                - Create for user_ids (Messages edit)
        GET  /api/v1/notifications/unread-count/   - Unread count
        POST /api/v1/notifications/{id}/read/      - Mark one as read
        POST /api/v1/notifications/read/           - Mark notification_ids as read
        POST /api/v1/notifications/read-all/       - Mark all as read
        POST /api/v1/notifications/delete/         - Delete notification_ids

    SMS:
        POST /api/v1/notifications/sms/            - Send batch (Messages edit)
        GET  /api/v1/notifications/sms/logs/       - History (Messages view)

    Events:
        POST /api/v1/notifications/dispatch/             - Any event (Messages edit)
        POST /api/v1/notifications/trigger-attendance/   - Attendance edit or X-Cron-Secret

Partial delivery failures are 200 responses carrying a summary. Bad input
is a 400, an unknown school a 404, a storage or configuration failure a 503.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from access.permissions import HasCronSecret, HasModuleAccess
from core.exceptions import ConfigurationError, NotFoundError, StorageError, ValidationError
from notifications.channels import OutboundMessage, Recipient, SmsChannel
from notifications.exceptions import InvalidPhoneNumberError
from notifications.models import SmsDeliveryLog
from notifications.orchestrator import NotificationOrchestrator
from notifications.phone import normalize_phone
from notifications.serializers import (
    CountResponseSerializer,
    DispatchSerializer,
    NotificationCreateSerializer,
    NotificationIdsSerializer,
    NotificationListQuerySerializer,
    NotificationSerializer,
    SmsDeliveryLogSerializer,
    SmsLogQuerySerializer,
    SmsSendSerializer,
    TriggerAttendanceSerializer,
    UnreadCountSerializer,
)
from notifications.services import NotificationService


def _error_response(error, status_code):
    return Response(error.to_dict(), status=status_code)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_notifications",
        summary="List notifications",
        description="The caller's notifications, newest first.",
        parameters=[
            OpenApiParameter(
                name="unread_only",
                type=bool,
                location=OpenApiParameter.QUERY,
                description="Only unread notifications",
                required=False,
            ),
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Maximum results (default 50)",
                required=False,
            ),
        ],
        responses={200: NotificationSerializer(many=True)},
        tags=["Notifications - Inbox"],
    ),
    create=extend_schema(
        operation_id="create_notifications",
        summary="Create notifications",
        description="Create one in-app notification per user. Requires Messages edit access.",
        request=NotificationCreateSerializer,
        responses={201: NotificationSerializer(many=True)},
        tags=["Notifications - Inbox"],
    ),
)
class NotificationViewSet(viewsets.GenericViewSet):
    """
    ViewSet for the caller's notifications.

    Permissions:
    - All endpoints require authentication
    - create additionally requires edit access on Messages
    - Every mutation only touches the caller's own notifications
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    access_module = "Messages"
    access_actions = {"create": "edit"}

    def get_queryset(self):
        return NotificationService.list_for_user(self.request.user)

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated(), HasModuleAccess()]
        return super().get_permissions()

    def list(self, request):
        query = NotificationListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        notifications = NotificationService.list_for_user(
            request.user,
            unread_only=query.validated_data["unread_only"],
            limit=query.validated_data["limit"],
        )
        return Response(NotificationSerializer(notifications, many=True).data)

    def create(self, request):
        serializer = NotificationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            created = NotificationService.create_bulk(
                [(user.pk, data["data"]) for user in data["user_ids"]],
                notification_type=data["type"],
                title=data["title"],
                message=data["message"],
                priority=data["priority"],
                action_url=data["action_url"],
            )
        except StorageError as e:
            return _error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(
            {
                "success": True,
                "message": f"Created {len(created)} notifications",
                "data": NotificationSerializer(created, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="get_unread_notification_count",
        summary="Get unread notification count",
        responses={200: UnreadCountSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        count = NotificationService.unread_count(request.user)
        return Response(UnreadCountSerializer({"unread_count": count}).data)

    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark notification as read",
        description="Idempotent: an already-read notification keeps its read_at.",
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(description="Notification not found"),
        },
        tags=["Notifications - Inbox"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        try:
            result = NotificationService.mark_one_read(request.user, pk)
        except StorageError as e:
            return _error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)

        if not result.success:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(NotificationSerializer(result.data).data)

    @extend_schema(
        operation_id="mark_notifications_read",
        summary="Mark notifications as read",
        request=NotificationIdsSerializer,
        responses={200: CountResponseSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["post"], url_path="read", url_name="read-many")
    def read_many(self, request):
        serializer = NotificationIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = NotificationService.mark_read(
                request.user, serializer.validated_data["notification_ids"]
            )
        except StorageError as e:
            return _error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({"success": True, "count": result.data})

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        request=None,
        responses={200: CountResponseSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        try:
            result = NotificationService.mark_all_read(request.user)
        except StorageError as e:
            return _error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({"success": True, "count": result.data})

    @extend_schema(
        operation_id="delete_notifications",
        summary="Delete notifications",
        request=NotificationIdsSerializer,
        responses={200: CountResponseSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["post"], url_path="delete", url_name="delete-many")
    def delete_many(self, request):
        serializer = NotificationIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = NotificationService.delete(
                request.user, serializer.validated_data["notification_ids"]
            )
        except StorageError as e:
            return _error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({"success": True, "count": result.data})


class SmsSendView(APIView):
    """
    Send one templated SMS per recipient through the configured provider.

    Per-recipient failures are reported in results; only missing provider
    configuration fails the request.
    """

    permission_classes = [IsAuthenticated, HasModuleAccess]
    access_module = "Messages"
    access_action = "edit"

    @extend_schema(
        operation_id="send_sms",
        summary="Send SMS batch",
        request=SmsSendSerializer,
        responses={
            200: OpenApiResponse(description="{success, message, results, summary}"),
            503: OpenApiResponse(description="SMS provider not configured"),
        },
        tags=["Notifications - SMS"],
    )
    def post(self, request):
        serializer = SmsSendSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        context = dict(data["data"])

        message = OutboundMessage(
            event_type=data["type"],
            school_name=context.pop("school_name", ""),
            message=data["message"] or None,
            data=context,
        )
        recipients = [
            Recipient(
                name=item["name"],
                phone=item["phone"],
                student_name=item["student_name"],
            )
            for item in data["recipients"]
        ]

        try:
            result = SmsChannel().deliver(recipients, message)
        except ConfigurationError as e:
            return _error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(
            {
                "success": True,
                "message": f"Sent {result.sent} SMS, {result.failed} failed",
                "results": [delivery.to_dict() for delivery in result.results],
                "summary": result.to_dict(),
            }
        )


class SmsLogView(APIView):
    """SMS delivery history, newest first, filterable by phone and type."""

    permission_classes = [IsAuthenticated, HasModuleAccess]
    access_module = "Messages"
    access_action = "view"

    @extend_schema(
        operation_id="list_sms_logs",
        summary="List SMS delivery logs",
        parameters=[SmsLogQuerySerializer],
        responses={200: SmsDeliveryLogSerializer(many=True)},
        tags=["Notifications - SMS"],
    )
    def get(self, request):
        query = SmsLogQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        logs = SmsDeliveryLog.objects.all()
        phone = params.get("phone")
        if phone:
            try:
                phone = normalize_phone(phone)
            except InvalidPhoneNumberError:
                pass  # match the raw value stored for unnormalizable numbers
            logs = logs.filter(phone=phone)
        if params.get("type"):
            logs = logs.filter(event_type=params["type"])

        logs = list(logs.order_by("-created_at", "-id")[: params["limit"]])
        return Response(
            {
                "success": True,
                "logs": SmsDeliveryLogSerializer(logs, many=True).data,
                "count": len(logs),
            }
        )


class DispatchView(APIView):
    """Dispatch any notification event and return its delivery summary."""

    permission_classes = [IsAuthenticated, HasModuleAccess]
    access_module = "Messages"
    access_action = "edit"
    serializer_class = DispatchSerializer

    @extend_schema(
        operation_id="dispatch_notification_event",
        summary="Dispatch notification event",
        request=DispatchSerializer,
        responses={
            200: OpenApiResponse(description="{success, data: DeliverySummary}"),
            400: OpenApiResponse(description="Missing or invalid type / school_id"),
            404: OpenApiResponse(description="School not found"),
        },
        tags=["Notifications - Events"],
    )
    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            summary = NotificationOrchestrator.dispatch(serializer.to_event())
        except ValidationError as e:
            return _error_response(e, status.HTTP_400_BAD_REQUEST)
        except NotFoundError as e:
            return _error_response(e, status.HTTP_404_NOT_FOUND)
        except (StorageError, ConfigurationError) as e:
            return _error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({"success": True, "data": summary.to_dict()})


class TriggerAttendanceView(DispatchView):
    """
    Attendance notifications (absence_alert, weekly_report).

    Called by a teacher confirming attendance, or by the external
    scheduler with the X-Cron-Secret header.
    """

    permission_classes = [HasCronSecret | (IsAuthenticated & HasModuleAccess)]
    access_module = "Attendance"
    access_action = "edit"
    serializer_class = TriggerAttendanceSerializer

    @extend_schema(
        operation_id="trigger_attendance_notifications",
        summary="Trigger attendance notifications",
        request=TriggerAttendanceSerializer,
        responses={
            200: OpenApiResponse(description="{success, data: DeliverySummary}"),
            400: OpenApiResponse(description="Missing type / school_id or invalid type"),
            404: OpenApiResponse(description="School not found"),
        },
        tags=["Notifications - Events"],
    )
    def post(self, request):
        return super().post(request)
