"""
Error taxonomy for tournament analysis.

Every failure that can end a request is an AnalysisError carrying the HTTP
status and a machine-readable category. Nothing here is retried: the API layer
renders the error and the request is over.
"""


class AnalysisError(Exception):
    status_code = 500
    category = "server_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message, "category": self.category}


class InvalidRequestError(AnalysisError):
    """Missing or malformed request fields. Raised before any outbound call."""
    status_code = 400
    category = "bad_input"


class TournamentNotFoundError(AnalysisError):
    status_code = 404
    category = "not_found"


class UpstreamError(AnalysisError):
    """The games feed failed: non-success status or a broken transport."""
    status_code = 502
    category = "upstream_failure"


class DecodeError(UpstreamError):
    """A line of the NDJSON feed is not a valid game record."""

    def __init__(self, message: str, line_number: int = 0):
        super().__init__(message)
        self.line_number = line_number


class UpstreamTimeoutError(AnalysisError):
    status_code = 504
    category = "upstream_timeout"


class NoDataError(AnalysisError):
    status_code = 404
    category = "no_data"


class NoGamesError(NoDataError):
    """Zero games decoded from the feed."""


class NoAnalyzedGamesError(NoDataError):
    status_code = 400
