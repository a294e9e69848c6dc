"""Application errors rendered as JSON responses.

Error codes have the form ``<type>:<surface>``, e.g. ``forbidden:workspace``.
The type decides the HTTP status.
"""

from fastapi.responses import JSONResponse

STATUS_BY_TYPE = {
    "bad_request": 400,
    "unauthorized": 401,
    "forbidden": 403,
    "not_found": 404,
    "rate_limit": 429,
    "offline": 503,
}

DEFAULT_MESSAGES = {
    "bad_request": "The request couldn't be processed. Please check your input and try again.",
    "unauthorized": "You need to sign in before continuing.",
    "forbidden": "You don't have access to this resource.",
    "not_found": "The requested resource was not found.",
    "rate_limit": "You have exceeded your request limit. Please try again later.",
    "offline": "We're having trouble reaching the server. Please try again later.",
}

DATABASE_MESSAGE = "An error occurred while executing a database query."


class AppError(Exception):
    """Error with a ``type:surface`` code and an optional cause."""

    def __init__(self, code: str, cause: str | None = None):
        error_type, _, surface = code.partition(":")
        if error_type not in STATUS_BY_TYPE:
            raise ValueError(f"Unknown error type in code {code!r}")
        self.code = code
        self.type = error_type
        self.surface = surface
        self.cause = cause
        self.message = DATABASE_MESSAGE if surface == "database" else DEFAULT_MESSAGES[error_type]
        super().__init__(f"{code}: {cause or self.message}")

    @property
    def status_code(self) -> int:
        return STATUS_BY_TYPE[self.type]

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content={"code": self.code, "message": self.message, "cause": self.cause},
        )
