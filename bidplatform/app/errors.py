"""Domain exceptions raised along the RFQ pipeline."""


class BidPlatformError(Exception):
    """Base class for all bid platform errors."""

    pass


class NoFileUploaded(BidPlatformError):
    """Request reached the pipeline without an uploaded file."""

    pass


class UnsupportedFileType(BidPlatformError):
    """Uploaded file has a media type the extractor cannot handle."""

    def __init__(self, media_type: str | None) -> None:
        super().__init__(f"Unsupported file type: {media_type}")
        self.media_type = media_type


class GenerationFailed(BidPlatformError):
    """Text-generation service call failed."""

    pass


class InvalidCredential(BidPlatformError):
    """Store bearer token is missing or not shaped like a JWT."""

    pass


class StoreOperationFailed(BidPlatformError):
    """Remote store returned a non-2xx response or could not be reached."""

    def __init__(
        self,
        operation: str,
        *,
        status_code: int | None = None,
        detail: object = None,
    ) -> None:
        message = f"Error during SharePoint operation '{operation}'"
        if status_code is not None:
            message += f" (status {status_code})"
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.detail = detail


class ProcessingFailed(BidPlatformError):
    """Catch-all for a pipeline run that aborted after extraction."""

    pass
