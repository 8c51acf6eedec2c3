"""
Service-level exceptions shared by all services.

Services also raise the builtins ValueError (invalid input) and
PermissionError (caller may not act on the resource).
"""


class NotFoundError(Exception):
    """Raised when a requested user, playlist, video or score does not exist."""
    pass
