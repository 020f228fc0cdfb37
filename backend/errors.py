# errors.py
# request-fatal error taxonomy. each error knows its HTTP status and JSON body

from typing import List, Optional


class ItineraryError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message}


class ParseError(ItineraryError):
    """Body is not decodable JSON."""
    status_code = 400
    default_message = "Invalid request"


class ValidationError(ItineraryError):
    """Schema violations, one {path, message} entry per violation."""
    status_code = 400
    default_message = "Invalid request"

    def __init__(self, details: List[dict], message: Optional[str] = None):
        super().__init__(message)
        self.details = details

    def to_body(self) -> dict:
        return {"error": self.message, "details": self.details}


class OriginResolutionError(ItineraryError):
    status_code = 400
    default_message = "Could not resolve origin"


class CandidateFetchError(ItineraryError):
    status_code = 502
    default_message = "Places search failed"


class NoCandidatesError(ItineraryError):
    status_code = 404
    default_message = "No stops found near origin"


class ConfigurationError(ItineraryError):
    status_code = 500
    default_message = "Server is missing required configuration"
