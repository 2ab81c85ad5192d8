"""
Domain-specific errors for the coaching bounded context.

All errors raised from the domain and application layers are defined here.
They are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class CoachingDomainError(Exception):
    """Base error for all coaching domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class MissingFieldError(CoachingDomainError):
    """Raised when a request lacks a field the operation cannot do without."""


class ProjectNotFoundError(CoachingDomainError):
    """Raised when a workspace project does not exist."""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class ModelNotFoundError(CoachingDomainError):
    """Raised when a workspace model profile does not exist."""

    def __init__(self, model_id: str) -> None:
        super().__init__(f"Model not found: {model_id}")
        self.model_id = model_id


class VideoNotFoundError(CoachingDomainError):
    """Raised when a workspace video does not exist."""

    def __init__(self, video_id: str) -> None:
        super().__init__(f"Video not found: {video_id}")
        self.video_id = video_id


class ProviderNotConfiguredError(CoachingDomainError):
    """Raised when no API key is configured for the LLM provider."""

    def __init__(self) -> None:
        super().__init__("OPENAI_API_KEY is not set on the server")


class LLMProviderError(CoachingDomainError):
    """Raised by the LLM adapter when a completion round trip fails."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"LLM provider call failed: {reason}")
        self.reason = reason


class GenerationFailedError(CoachingDomainError):
    """Raised when a generation use case cannot produce its result.

    ``action`` completes the public sentence "Failed to <action>."
    """

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(f"Failed to {action}: {reason}")
        self.action = action
        self.reason = reason


class InvalidModelOutputError(CoachingDomainError):
    """Raised when the LLM reply must be JSON and is not."""

    def __init__(self, subject: str) -> None:
        super().__init__(f"AI returned invalid JSON for {subject}.")
        self.subject = subject


class StorageError(CoachingDomainError):
    """Raised by repositories when a configured database call fails."""

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(f"Failed to {action}: {reason}")
        self.action = action
        self.reason = reason
