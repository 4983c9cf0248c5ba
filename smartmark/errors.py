class SmartMarkError(Exception):
    """Base class for errors whose message is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SmartMarkError):
    pass


class AuthorizationError(SmartMarkError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class AuthenticationError(SmartMarkError):
    pass


class BookmarkNotFound(SmartMarkError):
    def __init__(self, message: str = "Bookmark not found"):
        super().__init__(message)
