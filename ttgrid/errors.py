class TimetableError(Exception):
    """Base class for errors surfaced to the user."""


class CollaboratorError(TimetableError):
    """The aggregation or scheduling service failed or refused the request."""


class ExportError(TimetableError):
    """A document exporter could not produce its artifact."""
