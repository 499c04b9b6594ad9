"""
Error taxonomy shared by the userhub services.

Every error carries a human-readable ``message`` and a machine-readable
``code`` so routers can translate it without inspecting the text.
"""

from __future__ import annotations


class UserhubError(Exception):
    """Base class for service-level failures."""

    code = "ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(UserhubError):
    code = "NOT_FOUND"


class UserNotFound(NotFound):
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: str):
        super().__init__(f"User with id {user_id} not found")
        self.user_id = user_id


class BinaryContentNotFound(NotFound):
    code = "BINARY_CONTENT_NOT_FOUND"

    def __init__(self, binary_content_id: str):
        super().__init__(f"BinaryContent with id {binary_content_id} not found")
        self.binary_content_id = binary_content_id


class UserStatusNotFound(NotFound):
    code = "USER_STATUS_NOT_FOUND"


class Conflict(UserhubError):
    code = "CONFLICT"


class DuplicateEmail(Conflict):
    code = "DUPLICATE_EMAIL"

    def __init__(self, email: str):
        super().__init__(f"User with email {email} already exists")
        self.email = email


class DuplicateUsername(Conflict):
    code = "DUPLICATE_USERNAME"

    def __init__(self, username: str):
        super().__init__(f"User with username {username} already exists")
        self.username = username


class DuplicateUserStatus(Conflict):
    code = "DUPLICATE_USER_STATUS"

    def __init__(self, user_id: str):
        super().__init__(f"UserStatus for user {user_id} already exists")
        self.user_id = user_id


class BinaryContentInUse(Conflict):
    """Raised when a user still points at the content as its profile image."""

    code = "BINARY_CONTENT_IN_USE"

    def __init__(self, binary_content_id: str):
        super().__init__(f"BinaryContent with id {binary_content_id} is a user's profile image")
        self.binary_content_id = binary_content_id


class InvalidInput(UserhubError):
    code = "INVALID_INPUT"


class InvalidPayload(InvalidInput):
    """Raised when an uploaded file cannot be read."""

    code = "INVALID_PAYLOAD"


class InvalidUserData(InvalidInput):
    code = "INVALID_USER_DATA"
