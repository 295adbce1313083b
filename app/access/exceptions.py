"""
Access control exceptions.
"""

from core.exceptions import PermissionDeniedError


class AuthorizationDenied(PermissionDeniedError):
    """
    Raised when a principal's access level is below what an action needs.

    The message is deliberately generic; the required level and module
    are kept in details for logs, never echoed to clients.
    """

    default_error_code = "AUTHORIZATION_DENIED"

    def __init__(self, module_name: str = "", required: str = "", message: str = "Not permitted"):
        super().__init__(
            message,
            details={"module_name": module_name, "required": required},
        )

    def to_dict(self):
        return {"success": False, "error": self.message, "error_code": self.error_code}
