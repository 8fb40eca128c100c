class PlantSnapError(Exception):
    """Base exception for plantsnap."""


class ValidationError(PlantSnapError):
    """Raised when an entered API key does not look like one."""


class NotReadyError(PlantSnapError):
    """Raised when identify() is called without an image, a key, or while busy."""


class IdentificationError(PlantSnapError):
    """Base for failures raised by a vision adapter."""


class ImageEncodeError(IdentificationError):
    """Raised when the image cannot be decoded or re-encoded as JPEG."""


class TransportError(IdentificationError):
    """Raised on network failure or an HTTP status >= 400."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(IdentificationError):
    """Raised when the response cannot be mapped to a PlantResult."""


class EnvelopeDecodeError(DecodeError):
    """Outer chat-completions JSON is malformed or has no choices."""


class ContentDecodeError(DecodeError):
    """choices[0].message.content is not JSON of the result shape."""
