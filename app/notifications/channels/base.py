"""
Channel contract and result types.

A channel takes the recipients eligible for it plus one outbound message
and returns a ChannelResult with one DeliveryResult per attempted
recipient. Recipients a channel is not eligible for never reach it, so
they are not counted as failures.

Invariant:
    ChannelResult.sent + ChannelResult.failed == ChannelResult.total
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from django.utils import timezone

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from typing import Any


@dataclass(frozen=True)
class Recipient:
    """
    A resolved notification target.

    Attributes:
        name: Salutation used in SMS ("Parent")
        phone: Raw phone number; empty when the channel can't be used
        user_id: Linked account for in-app delivery, or None
        student_id: Student the notification is about
        student_name: Student display name
        context: Per-recipient template values (weekly counts)
    """

    name: str = "Parent"
    phone: str = ""
    user_id: int | None = None
    student_id: int | None = None
    student_name: str = ""
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def has_phone(self) -> bool:
        return bool(self.phone and self.phone.strip())

    @property
    def has_account(self) -> bool:
        return self.user_id is not None


@dataclass(frozen=True)
class OutboundMessage:
    """
    What to say, shared by every recipient of a dispatch.

    Attributes:
        event_type: NotificationType value; selects the templates
        school_name: Used by the templates
        message: Explicit text, replaces the template verbatim
        title: Explicit in-app title
        data: Shared context (date, period); stored on in-app rows
    """

    event_type: str
    school_name: str = ""
    message: str | None = None
    title: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class DeliveryResult:
    recipient: str
    success: bool
    message_id: str | None = None
    error: str | None = None
    name: str = ""
    timestamp: datetime = field(default_factory=timezone.now)

    @classmethod
    def sent(cls, recipient: str, message_id: str | None, name: str = "") -> DeliveryResult:
        return cls(recipient=recipient, success=True, message_id=message_id, name=name)

    @classmethod
    def failed(cls, recipient: str, error: str, name: str = "") -> DeliveryResult:
        return cls(recipient=recipient, success=False, error=error, name=name)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "success": self.success,
            "recipient": self.recipient,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.name:
            result["name"] = self.name
        if self.success:
            result["message_id"] = self.message_id
        else:
            result["error"] = self.error
        return result


@dataclass
class ChannelResult:
    """
    Outcome of one channel call.

    Attributes:
        channel: Channel name
        results: One entry per attempted recipient
        dropped: Eligible recipients cut by a send cap, never attempted
        error: Channel-level failure (configuration, storage), if any
    """

    channel: str
    results: list[DeliveryResult] = field(default_factory=list)
    dropped: int = 0
    error: str | None = None

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def sent(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return self.total - self.sent

    def to_dict(self, include_results: bool = False) -> dict[str, Any]:
        summary: dict[str, Any] = {"total": self.total, "sent": self.sent, "failed": self.failed}
        if include_results:
            summary["results"] = [result.to_dict() for result in self.results]
        return summary


@runtime_checkable
class NotificationChannel(Protocol):
    """
    Protocol for delivery channels.

    Required Members:
        name: Registry key ("sms", "in_app")
        is_eligible: Whether a recipient can be reached on this channel
        deliver: Send to every recipient, recovering per-recipient errors
    """

    name: str

    def is_eligible(self, recipient: Recipient) -> bool: ...

    def deliver(self, recipients: Sequence[Recipient], message: OutboundMessage) -> ChannelResult: ...
