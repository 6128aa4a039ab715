"""Exceptions raised by the rule store."""


class RuleStoreError(Exception):
    """Base exception for rule persistence failures."""


class InvalidUserIdError(RuleStoreError, ValueError):
    """Raised when a user id cannot be mapped to a storage location."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"Invalid user id: {user_id!r}")
