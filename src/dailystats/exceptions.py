"""Domain errors raised by the daily statistics workflow.

The state and input errors subclass ``ValueError`` so API views can keep
translating service ``ValueError``s into HTTP 400 responses.
"""


class DailyStatError(ValueError):
    """Base class for workflow errors reported back to the caller."""


class InvalidStateError(DailyStatError):
    """The record is not in the status required by the transition."""


class InvalidInputError(DailyStatError):
    """Malformed arguments (empty rejection notes, bad ids, ...)."""


class NotFoundError(LookupError):
    """No daily statistic with the requested id."""
