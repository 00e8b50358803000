"""
Event name constants.
"""


class AuthEvent:
    """Auth-state change events delivered to `Auth.on_auth_state_change` listeners."""
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


class MediaKind:
    """Attachment kinds a task can carry."""
    IMAGE = "image"
    VIDEO = "video"

    ALL = (IMAGE, VIDEO)
