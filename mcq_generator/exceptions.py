from typing import Any, Dict, Optional


class MCQGeneratorError(Exception):
    """Base error mapped to a JSON error response."""

    status_code = 500

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def body(self) -> Dict[str, Any]:
        return {"error": self.message, **self.extra}


class InputValidationError(MCQGeneratorError):
    status_code = 400


class AuthenticationError(MCQGeneratorError):
    status_code = 401


class UpstreamError(MCQGeneratorError):
    """The completion provider call failed."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__("Internal server error", detail=detail)
        self.detail = detail


class OutputShapeError(MCQGeneratorError):
    """Model text did not yield an array of the required length."""

    status_code = 502

    def __init__(self, message: str, preview: str, parsed_length: int,
                 token_usage: Optional[Dict[str, Any]] = None):
        extra: Dict[str, Any] = {
            "model_output_preview": preview,
            "parsed_length": parsed_length,
        }
        if token_usage is not None:
            extra["token_usage"] = token_usage
        super().__init__(message, **extra)
        self.preview = preview
        self.parsed_length = parsed_length
