"""Typed failures raised by the ledgers, the ranker and the repository.

Every engagement operation surfaces one of these to its caller; the HTTP
layer maps ``status_code`` onto the response.
"""
from typing import Optional


class EngagementError(Exception):
    """Base class for all engine failures."""

    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotAuthenticated(EngagementError):
    status_code = 401
    default_detail = "No authenticated user"


class NotAuthorized(EngagementError):
    status_code = 403
    default_detail = "Only the owner may modify this event"


class NotFound(EngagementError):
    status_code = 404
    default_detail = "Not found"


class EventNotFound(NotFound):
    """The event vanished between the RSVP upsert and the attendee append."""

    default_detail = "Event not found"

    def __init__(self, event_id: str, detail: Optional[str] = None):
        self.event_id = event_id
        super().__init__(detail or f"Event {event_id} not found")


class ValidationFailed(EngagementError):
    status_code = 422
    default_detail = "Invalid event"


class RepositoryUnavailable(EngagementError):
    status_code = 503
    default_detail = "Event repository unavailable"


class RecommendationUnavailable(EngagementError):
    status_code = 503
    default_detail = "Recommendations are temporarily unavailable"


class InvalidInstant(ValueError):
    """A timestamp value in a representation we do not understand."""
