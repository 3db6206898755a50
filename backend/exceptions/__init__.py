from typing import Optional, Dict, Any

class SnapfactException(Exception):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }

class APIException(SnapfactException):
    pass

class ValidationException(SnapfactException):
    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Validation failed for {field}: {reason}",
            {"field": field, "reason": reason}
        )

class InvalidQuery(ValidationException):
    def __init__(self, query: Optional[str]):
        super().__init__("query", "search query must not be blank")
        self.details["query"] = query

class GenerationFailure(APIException):
    """The generative model was unreachable, errored or returned nothing."""

    def __init__(self, reason: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"LLM service error: {reason}",
            {"reason": reason, "cause": type(cause).__name__ if cause else None}
        )
        self.cause = cause

class SearchFailure(APIException):
    def __init__(self, reason: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Evidence search failed: {reason}",
            {"reason": reason, "cause": type(cause).__name__ if cause else None}
        )
        self.cause = cause

class MalformedModelOutput(SnapfactException):
    """Model text could not be decoded into the expected shape.

    ``raw_text`` keeps the untouched model output for diagnostics.
    """

    def __init__(self, reason: str, raw_text: Optional[str], schema: Optional[str] = None):
        super().__init__(
            f"Malformed model output: {reason}",
            {"reason": reason, "schema": schema}
        )
        self.raw_text = raw_text

class VerificationFailed(SnapfactException):
    def __init__(self, stage: str, cause: SnapfactException):
        super().__init__(
            f"Verification failed during {stage}: {cause.message}",
            {"stage": stage, "error": cause.__class__.__name__, "cause": cause.details}
        )
        self.stage = stage
        self.cause = cause

class UnexpectedPipelineError(SnapfactException):
    """An untyped error escaped a pipeline stage."""

    def __init__(self, cause: BaseException):
        super().__init__(
            f"Unexpected error: {cause}",
            {"error": type(cause).__name__}
        )
        self.cause = cause
