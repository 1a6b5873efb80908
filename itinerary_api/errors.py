class PlannerError(Exception):
    """Base class for errors raised while planning an itinerary."""


class ValidationError(PlannerError):
    """The planning request is malformed (missing sections, non-finite coordinates)."""


class UpstreamError(PlannerError):
    """The text generator could not be reached or failed mid-stream."""


class EncodingError(PlannerError):
    """Generated text does not follow the REASONING:/RESULT: marker layout."""
