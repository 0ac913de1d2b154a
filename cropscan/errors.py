"""Error taxonomy — each error knows the HTTP status it maps to."""
from typing import Optional

from cropscan.constants import MSG_ERR_INTERNAL, MSG_ERR_METHOD, MSG_ERR_UNAUTHORIZED


class AnalysisError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        match self.details:
            case str() as d if d:
                return {"error": self.message, "details": d}
            case _:
                return {"error": self.message}


class ValidationError(AnalysisError):
    """Bad, missing or disallowed input."""

    status_code = 400


class AuthError(AnalysisError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__(MSG_ERR_UNAUTHORIZED)


class MethodError(AnalysisError):
    status_code = 405

    def __init__(self) -> None:
        super().__init__(MSG_ERR_METHOD)


class ConfigurationError(AnalysisError):
    """A credential required by the selected provider is missing."""


class ProviderError(AnalysisError):
    """The provider could not be reached."""


class InternalError(AnalysisError):

    def __init__(self, details: Optional[str] = None) -> None:
        super().__init__(MSG_ERR_INTERNAL, details)
