"""
Application exceptions.

Every error carries an HTTP status code and a human-readable message.
The API layer renders them as:

    {"success": false, "message": "...", "status": 404}
"""

from typing import Any


class ForumHubError(Exception):
    """Base class for all application errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Error payload for API responses."""
        return {
            "success": False,
            "message": self.message,
            "status": self.status_code,
        }


class AuthenticationError(ForumHubError):
    """Missing, expired or malformed credentials."""

    status_code = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class NotFoundError(ForumHubError):
    status_code = 404


class ForumNotFoundError(NotFoundError):
    def __init__(self, message: str = "Forum does not exist") -> None:
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: Any) -> None:
        super().__init__(f"User '{user_id}' does not exist")


class ConflictError(ForumHubError):
    status_code = 409


class ForumExistsError(ConflictError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Forum '{name}' already exists")


class AlreadyMemberError(ConflictError):
    def __init__(self) -> None:
        super().__init__("You are already enrolled in this forum")


class NotMemberError(ForumHubError):
    status_code = 400

    def __init__(self) -> None:
        super().__init__("User not enrolled in forum")
