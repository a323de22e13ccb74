"""Failure taxonomy for generation attempts.

Every surfaced error is local to one attempt: the controller records the
message for display, clears the in-flight flag and leaves the gallery alone.
Rejected submissions (empty prompt, request already in flight) are not errors
at all; they are reported as a ``REJECTED`` outcome and never shown to the
user.
"""

GENERIC_FAILURE_MESSAGE = "Failed to generate image. Please try again."
EMPTY_RESULT_MESSAGE = "No image data returned from model."


class GenerationError(Exception):
    """Base class for user-visible generation failures.

    The message is intended to be displayed directly to the user.
    """

    kind = "generation_error"

    def __init__(self, message: str | None = None):
        self.message = message or GENERIC_FAILURE_MESSAGE
        super().__init__(self.message)


class EmptyResultError(GenerationError):
    """The provider answered but returned no usable image data."""

    kind = "empty_result"

    def __init__(self, message: str | None = None):
        super().__init__(message or EMPTY_RESULT_MESSAGE)


class ProviderError(GenerationError):
    """Transport, authentication, server or payload failure."""

    kind = "provider_error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
