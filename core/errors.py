"""
Error taxonomy for the composition and publishing pipeline.

Every error here is recoverable: callers convert them into a notice or a
failed PublishResult and return to an interactive state.
"""

from typing import Optional


class StudioError(Exception):
    """Base class for pipeline errors"""
    pass


class EmptyComposition(StudioError):
    """Raised when a render is requested with no scenes."""

    def __init__(self, message: str = "Add at least one scene before rendering."):
        super().__init__(message)


class EngineBusy(StudioError):
    """Raised when a render is requested while another is in flight."""

    def __init__(self, message: str = "A render is already in progress."):
        super().__init__(message)


class EngineNotReady(StudioError):
    """Raised when a render is requested before the engine finished loading."""

    def __init__(self, message: str = "The render engine is not ready yet."):
        super().__init__(message)


class RenderFailed(StudioError):
    """Raised when the encoding engine fails. The engine stays usable."""

    def __init__(self, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.cause = cause
        if message is None:
            message = f"Video rendering failed: {cause}" if cause else "Video rendering failed."
        super().__init__(message)


class EncodingFailed(StudioError):
    """Raised when a render artifact cannot be transport-encoded."""

    def __init__(self, message: str = "Failed to encode video payload."):
        super().__init__(message)


class NotReady(StudioError):
    """Raised when publish preconditions are not met."""

    def __init__(self, message: str = "Fill in title, description and OAuth credentials first."):
        super().__init__(message)


class UploadRejected(StudioError):
    """Raised when the upload service or the transport rejects a publish."""

    def __init__(self, message: str = "Unable to upload video."):
        super().__init__(message)
