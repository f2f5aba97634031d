"""Custom exceptions for InboxSage."""


class InboxSageError(Exception):
    """Base exception for InboxSage."""


class ConfigurationError(InboxSageError):
    """Missing or invalid configuration (e.g. absent API credentials)."""


class PipelineError(InboxSageError):
    """Pipeline execution error."""


class CollectorError(PipelineError):
    """Feed fetch or parse error for a single source."""


class SummarizationError(PipelineError):
    """Summarization error for a single article."""


class DigestError(PipelineError):
    """Digest generation error."""


class NoContentError(DigestError):
    """No eligible articles to build a digest from."""


class DigestDeliveryError(DigestError):
    """Digest email could not be delivered to every recipient."""


class DatabaseError(InboxSageError):
    """Database operation error."""


class NotFoundError(InboxSageError):
    """Requested record does not exist or is not owned by the caller."""


class UserNotFoundError(NotFoundError):
    """User or user profile not found."""


class SourceNotFoundError(NotFoundError):
    """Source not found, inactive, or not owned by the caller."""


class APIError(InboxSageError):
    """External API error."""


class AIServiceError(APIError):
    """Text-generation service error."""


class EmailServiceError(APIError):
    """Transactional email service error."""
