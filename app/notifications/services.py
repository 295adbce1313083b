"""
Notification service layer.

This module provides the business logic for in-app notifications:
creating them in bulk and managing a user's inbox.

Services:
    NotificationService: Inbox queries and read/delete mutations

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Database failures on writes raise StorageError, never a silent no-op
    - Every mutation is scoped to the caller's own notifications
    - Mutations are idempotent: read_at is set on the first transition only

Usage:
    from notifications.services import NotificationService

    # Inbox
    notifications = NotificationService.list_for_user(user, unread_only=True)
    count = NotificationService.unread_count(user)

    # Mark as read
    result = NotificationService.mark_read(user, [12, 13])
    result = NotificationService.mark_all_read(user)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import DatabaseError
from django.utils import timezone

from core.exceptions import StorageError
from core.services import BaseService, ServiceResult
from notifications.models import Notification, NotificationPriority, NotificationType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from authentication.models import User

DEFAULT_LIST_LIMIT = 50


class NotificationService(BaseService):
    """
    Service for in-app notification operations.

    Methods:
        create_bulk: Insert one notification per recipient in a single batch
        list_for_user: Newest-first inbox, optionally unread only
        unread_count: Badge count
        mark_one_read: Mark a single notification as read
        mark_read: Mark a set of notifications as read
        mark_all_read: Mark every unread notification as read
        delete: Delete a set of notifications
    """

    @classmethod
    def create_bulk(
        cls,
        recipients: Iterable[tuple[int, dict]],
        *,
        notification_type: str = NotificationType.GENERAL,
        title: str,
        message: str,
        priority: str = NotificationPriority.MEDIUM,
        action_url: str = "",
    ) -> list[Notification]:
        """
        Create notifications in one bulk insert.

        Args:
            recipients: (user_id, data) pairs; data is stored per row
            notification_type: NotificationType value
            title: Notification title
            message: Notification body
            priority: NotificationPriority value
            action_url: Dashboard path

        Returns:
            Created Notification instances

        Raises:
            StorageError: If the insert fails (nothing is created)
        """
        rows = [
            Notification(
                user_id=user_id,
                type=notification_type,
                title=title,
                message=message,
                priority=priority,
                action_url=action_url or "",
                data=data or {},
            )
            for user_id, data in recipients
        ]
        if not rows:
            return []

        try:
            with cls.atomic():
                created = Notification.objects.bulk_create(rows)
        except DatabaseError as e:
            cls.get_logger().error(f"Failed to create {len(rows)} {notification_type} notifications: {e}")
            raise StorageError(
                "Could not create notifications",
                error_code="NOTIFICATION_WRITE_FAILED",
                details={"count": len(rows)},
            ) from e

        cls.get_logger().info(f"Created {len(created)} {notification_type} notifications")
        return created

    @classmethod
    def list_for_user(
        cls,
        user: User,
        unread_only: bool = False,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[Notification]:
        queryset = Notification.objects.filter(user=user)
        if unread_only:
            queryset = queryset.filter(is_read=False)
        return list(queryset.order_by("-created_at", "-id")[:limit])

    @classmethod
    def unread_count(cls, user: User) -> int:
        return Notification.objects.filter(user=user, is_read=False).count()

    @classmethod
    def mark_one_read(cls, user: User, notification_id: int) -> ServiceResult[Notification]:
        """
        Mark a single notification as read.

        Returns NOT_FOUND for missing notifications and for other users'
        notifications alike.
        """
        notification = Notification.objects.filter(pk=notification_id, user=user).first()
        if notification is None:
            return ServiceResult.failure("Notification not found", error_code="NOT_FOUND")

        cls.mark_read(user, [notification.pk])
        notification.refresh_from_db()
        return ServiceResult.success(notification)

    @classmethod
    def mark_read(cls, user: User, notification_ids: Iterable[int]) -> ServiceResult[int]:
        """
        Mark the given notifications as read.

        Already-read notifications keep their original read_at. Ids that
        don't exist or belong to someone else are ignored.

        Returns:
            ServiceResult with the count newly marked read
        """
        ids = list(notification_ids)
        if not ids:
            return ServiceResult.success(0)
        count = cls._mark_unread_as_read(
            Notification.objects.filter(user=user, pk__in=ids, is_read=False)
        )
        cls.get_logger().debug(f"Marked {count} of {len(ids)} notifications read for user {user.id}")
        return ServiceResult.success(count)

    @classmethod
    def mark_all_read(cls, user: User) -> ServiceResult[int]:
        count = cls._mark_unread_as_read(
            Notification.objects.filter(user=user, is_read=False)
        )
        cls.get_logger().info(f"Marked {count} notifications as read for user {user.id}")
        return ServiceResult.success(count)

    @classmethod
    def delete(cls, user: User, notification_ids: Iterable[int]) -> ServiceResult[int]:
        ids = list(notification_ids)
        if not ids:
            return ServiceResult.success(0)
        try:
            deleted, _ = Notification.objects.filter(user=user, pk__in=ids).delete()
        except DatabaseError as e:
            cls.get_logger().error(f"Failed to delete notifications for user {user.id}: {e}")
            raise StorageError(
                "Could not delete notifications",
                error_code="NOTIFICATION_WRITE_FAILED",
            ) from e

        cls.get_logger().info(f"Deleted {deleted} notifications for user {user.id}")
        return ServiceResult.success(deleted)

    @classmethod
    def _mark_unread_as_read(cls, queryset) -> int:
        now = timezone.now()
        try:
            return queryset.update(is_read=True, read_at=now, updated_at=now)
        except DatabaseError as e:
            cls.get_logger().error(f"Failed to mark notifications read: {e}")
            raise StorageError(
                "Could not update notifications",
                error_code="NOTIFICATION_WRITE_FAILED",
            ) from e
