"""
Custom exceptions for the activity ledger with user-friendly error messages.
"""

class ActivityException(Exception):
    """Base exception for activity ledger errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message

class UserNotFoundError(ActivityException):
    """Raised when a referenced user id does not resolve."""
    def __init__(self, user_id):
        super().__init__(
            "User not found",
            "❌ You haven't registered yet! Use `/register` to start tracking."
        )
        self.user_id = user_id

class StoreFailureError(ActivityException):
    """Raised when the underlying persistence operation fails."""
    def __init__(self, message: str):
        super().__init__(
            message,
            "❌ Database error occurred. Please try again later."
        )

class InconsistentStateError(ActivityException):
    """Raised when today's reading was found by date but not by identity."""
    def __init__(self, user_id, entry_id):
        super().__init__(
            f"Activity could not be logged for user {user_id}, entry {entry_id} could not be re-located for update",
            "❌ Your reading could not be saved. Please try again."
        )
        self.user_id = user_id
        self.entry_id = entry_id

class InvalidActivityTypeError(ActivityException):
    """Raised when an activity name is not registered."""
    def __init__(self, value):
        super().__init__(
            f"Invalid activity type: {value!r}",
            "❌ Invalid activity type"
        )

class ActivityValidationError(ActivityException):
    """Raised when a submitted value fails validation."""
    def __init__(self, value, reason: str):
        super().__init__(
            f"Invalid activity value {value}: {reason}",
            f"❌ {reason}"
        )

class DateRangeError(ActivityException):
    """Raised when a date argument cannot be parsed or the range is inverted."""
    def __init__(self, reason: str):
        super().__init__(
            f"Invalid date range: {reason}",
            f"❌ {reason}"
        )

