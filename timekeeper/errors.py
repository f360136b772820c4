"""Exception hierarchy shared by the store, the client and the API service."""


class TimeTrackingError(Exception):
    """Base class for every error raised by timekeeper."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(TimeTrackingError):
    """No signed-in user. Raised before any network call is made."""

    status_code = 401


class RemoteError(TimeTrackingError):
    """The tracking API answered with a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DataIntegrityError(TimeTrackingError):
    """A derived view could not resolve a required relationship.

    This signals an inconsistent snapshot and is never caught by the derivation.
    """


class FolderCycleError(TimeTrackingError):
    """Moving a folder under itself or one of its descendants."""

    status_code = 400


class NotFoundError(TimeTrackingError):
    """Row does not exist or belongs to another user."""

    status_code = 404


class ValidationError(TimeTrackingError):
    """Request payload is structurally valid but semantically wrong."""

    status_code = 400
