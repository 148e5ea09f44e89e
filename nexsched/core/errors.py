"""Scheduling error kinds shared by the domain layers and the HTTP routes."""


class SchedulingError(Exception):
    """Base class for failures scoped to a single scheduling request."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(SchedulingError):
    """Unknown service, dentist or appointment id."""


class ConflictError(SchedulingError):
    """The requested interval overlaps a scheduled appointment."""


class InvalidTransitionError(SchedulingError):
    """The appointment cannot move to the requested status."""


class ValidationError(SchedulingError):
    """Malformed input or clinic configuration."""
