"""Error taxonomy shared by the verification core and the API layer.

The core raises these; only the handlers in ``app.main`` turn them into HTTP
responses, using the ``status_code`` each class carries.
"""


class OnboardingError(Exception):
    """Base class for every error raised by the verification core."""

    status_code: int = 500
    error_code: str = "ONBOARDING_ERROR"

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict:
        return {"error_code": self.error_code, "detail": self.message, **self.context}


class NotFoundError(OnboardingError):
    """A client, document or document type does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | int | None = None):
        if identifier is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message, {"resource": resource, "identifier": identifier})
        self.resource = resource
        self.identifier = identifier


class ValidationError(OnboardingError):
    """Invalid dates, negative validity windows, malformed extracted fields or
    disallowed status transitions."""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, fields: dict[str, str] | None = None):
        super().__init__(message, {"fields": fields} if fields else None)
        self.fields = fields or {}


class UpstreamAnalyzerError(OnboardingError):
    """The external document analyzer failed. Never retried inside the core."""

    status_code = 502
    error_code = "UPSTREAM_ANALYZER_ERROR"

    def __init__(self, message: str, document_id: int | None = None):
        super().__init__(message, {"document_id": document_id} if document_id is not None else None)
        self.document_id = document_id
