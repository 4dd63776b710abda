class DisputeResolutionError(Exception):
    """Base error for the dispute pipeline.

    ``http_status`` is the status a synchronous submission surface should
    answer with: 4xx when the caller sent bad input, 5xx when a downstream
    capability failed.
    """

    http_status: int = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidSubmission(DisputeResolutionError):
    http_status = 400


class VendorResolutionFailure(DisputeResolutionError):
    http_status = 404


class GenerationFailure(DisputeResolutionError):
    """The text-generation capability failed or returned non-text content."""

    http_status = 502


class ExtractionFailure(DisputeResolutionError):
    """The extraction response could not be parsed into dispute facts."""

    http_status = 502

    def __init__(self, detail: str, raw_text: str):
        super().__init__(detail)
        self.raw_text = raw_text
