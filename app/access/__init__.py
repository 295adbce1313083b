"""
Access application.

Per-module, per-principal access control for the school dashboard.

Key components:
    - AccessLevel: Ordered levels NONE < VIEW < EDIT < DELETE < ALL
    - evaluator: Pure decisions over (principal, module, access map)
    - ModuleAccess: Stored grants, one per (user, module)
    - AccessPolicyService: Read/modify/replace grants
    - DefaultAccessProvisioner: Role default grants for new principals

Usage:
    from access.evaluator import can_edit
    from access.services import AccessPolicyService

    access_map = AccessPolicyService.get_access_map(user.id)
    if can_edit(user, "Attendance", access_map):
        ...
"""
