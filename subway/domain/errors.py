"""Error taxonomy for line topology and persistence."""


class SubwayError(Exception):
    """Base class for every error raised by the subway package."""


class DomainError(SubwayError):
    """A local validation failure. Raised synchronously, never retried."""


class InvalidDistanceError(DomainError):
    """Distance is not a positive integer, or a split would not leave a positive remainder."""


class InvalidSectionError(DomainError):
    """A section joins a station to itself."""


class InvalidNameError(DomainError):
    """A station name, line name or line color is blank."""


class DuplicateSectionError(DomainError):
    """Both endpoints are already on the path; adding the section would create a cycle or branch."""


class DisconnectedSectionError(DomainError):
    """Neither endpoint is on the (non-empty) path."""


class StationNotFoundError(DomainError):
    """The station to remove is not on the path."""


class SingleSectionError(DomainError):
    """Only one section remains; delete the line instead of its last station."""


class BrokenTopologyError(SubwayError):
    """The stored edges do not form a single simple path.

    This signals a bug or corrupted storage rather than bad user input.
    """


class PersistenceError(SubwayError):
    """A row-store operation failed and the transaction was rolled back."""


class ResourceNotFoundError(SubwayError):
    """A station or line looked up by identifier does not exist."""
