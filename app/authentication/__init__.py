"""
Authentication application.

Key components:
    - UserRole: Fixed principal roles
    - User: Custom email-based user with a role
    - Signals: Role default access provisioning on user creation

Usage:
    from authentication.models import User, UserRole
"""
