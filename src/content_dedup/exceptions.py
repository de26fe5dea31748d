"""
Custom exceptions for the content deduplication service.

The similarity, detection and merge functions never raise for well-formed
records; these exceptions cover configuration, input parsing and lookups
performed by the service and tool layers.
"""


class ContentDedupError(Exception):
    """Base exception for all content deduplication errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ContentDedupError):
    """Error in detector or service configuration."""
    pass


class RecordValidationError(ContentDedupError):
    """A supplied content record could not be parsed."""

    def __init__(self, message: str, errors: list = None):
        super().__init__(message, {'errors': errors or []})
        self.errors = errors or []


class RecordNotFoundError(ContentDedupError):
    """Requested record id is not part of the supplied record set."""

    def __init__(self, record_id: str, available_ids: list = None):
        message = f"Record '{record_id}' not found"
        super().__init__(message, {
            'record_id': record_id,
            'available_ids': available_ids or []
        })
        self.record_id = record_id


class DeduplicationError(ContentDedupError):
    """Error during a deduplication run."""
    pass


class PolicyValidationError(RecordValidationError):
    """Supplied merge policy options could not be parsed."""
    pass
