"""
Django signals for authentication.

This module defines signal handlers for:
- Provisioning role default module access when a User is created

Related files:
    - apps.py: Signal import in ready()
    - access/services.py: DefaultAccessProvisioner
"""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def provision_default_access(sender, instance, created, raw=False, **kwargs):
    """
    Grant the role's default module access to newly created users.

    Skipped for fixture loading (raw saves). Provisioning failures raise
    StorageError so the surrounding transaction can roll the user back.
    """
    if not created or raw:
        return

    from access.services import DefaultAccessProvisioner

    result = DefaultAccessProvisioner.provision_defaults(instance.id, instance.role)
    logger.debug(
        f"Provisioned {result.data} default grants for user {instance.id} ({instance.role})"
    )
