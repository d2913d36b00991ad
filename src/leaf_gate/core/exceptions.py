"""Custom exceptions for leaf image validation."""


class LeafGateError(Exception):
    """Base exception for leaf gate errors."""

    code: str = "VALIDATION_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DecodeError(LeafGateError):
    """Bytes are not a supported raster image."""

    code = "INVALID_IMAGE"
    status_code = 400

    def __init__(self, message: str = "Could not decode image data", details: dict | None = None):
        super().__init__(message, details)
        self.suggestions = [
            "Upload a JPEG, PNG, WebP, BMP or TIFF photo",
            "Check that the file is not truncated or corrupt",
        ]


class RenderSurfaceError(LeafGateError):
    """Could not allocate a buffer for decoding or resampling."""

    code = "RESOURCE_EXHAUSTED"
    status_code = 503


class EmptyImageError(LeafGateError):
    """Upload contained no bytes."""

    code = "EMPTY_IMAGE"
    status_code = 400

    def __init__(self, message: str = "Image file is empty"):
        super().__init__(message)


class ImageTooLargeError(LeafGateError):
    """Upload exceeds size limits."""

    code = "IMAGE_TOO_LARGE"
    status_code = 413


class UnsupportedMediaError(LeafGateError):
    """Upload content type is not an accepted image type."""

    code = "UNSUPPORTED_MEDIA_TYPE"
    status_code = 415
