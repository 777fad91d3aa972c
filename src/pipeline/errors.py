"""Error taxonomy for the deck analysis pipeline.

Each error carries the HTTP-style status the API layer reports to the
caller, so the pipeline itself stays independent of the web framework.
"""


class PipelineError(Exception):
    """Base class for all pipeline failures.

    Args:
        message: Human-readable description surfaced to the caller.
    """

    status_code: int = 500

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(message)
        self.message = message


class InvalidRequest(PipelineError):
    """Missing job id, unsupported content type, or a non-triggerable job."""

    status_code = 400


class Unauthorized(PipelineError):
    """No valid session accompanied the request."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFound(PipelineError):
    """The job does not exist or is not owned by the caller."""

    status_code = 404

    def __init__(self, message: str = "Pitch deck not found") -> None:
        super().__init__(message)


class DownloadError(PipelineError):
    """The stored source document could not be retrieved."""

    def __init__(self, message: str = "Failed to download file") -> None:
        super().__init__(message)


class ExtractionError(PipelineError):
    """Text could not be read from the document."""


class NoTextFound(ExtractionError):
    """Extraction succeeded but produced no text."""

    def __init__(
        self, message: str = "No text could be extracted from the document"
    ) -> None:
        super().__init__(message)


class ExtractionServiceError(ExtractionError):
    """The remote document-analysis service failed."""


class AnalysisServiceError(PipelineError):
    """The completion service could not be reached or rejected the request."""


class MalformedModelOutput(PipelineError):
    """The completion service returned data that does not fit the schema."""


class PersistenceError(PipelineError):
    """The analysis report could not be stored."""

    def __init__(self, message: str = "Failed to create analysis report") -> None:
        super().__init__(message)


class Timeout(PipelineError):
    """The pipeline exceeded its deadline."""

    status_code = 504

    def __init__(self, message: str = "Analysis timed out") -> None:
        super().__init__(message)
