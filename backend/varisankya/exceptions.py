"""
Error kinds raised by the due-date engine and the services around it.
"""


class RecurrenceError(ValueError):
    """Base class for due-date computation failures."""


class InvalidConfiguration(RecurrenceError):
    """A custom cycle is missing its positive day/month count."""


class MissingDueDate(RecurrenceError):
    """Keep-schedule was requested for a subscription without a due date."""


class InvalidDate(RecurrenceError):
    """A date could not be constructed or is not a calendar date."""


class SubscriptionNotFound(LookupError):
    """No subscription (or history entry) with the given id."""


class NotificationPermissionDenied(RuntimeError):
    """The device refused permission to display notifications."""


class InsightUnavailable(RuntimeError):
    """AI insight generation is disabled or has no credentials."""


class InsightGenerationFailed(InsightUnavailable):
    """The LLM call failed or returned unusable output."""
