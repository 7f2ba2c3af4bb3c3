"""Exception hierarchy for roomfinder."""


class RoomFinderError(Exception):
    """Base exception for all roomfinder errors."""


class InvalidCriteriaError(RoomFinderError):
    """Raised when search criteria fall outside the recognized options."""


class ListingNotFoundError(RoomFinderError):
    """Raised when a referenced listing does not exist."""
