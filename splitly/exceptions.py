"""Error types raised by the splitting service."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from splitly.models.schemas import ScenarioFailure


class SplitlyError(Exception):
    """Base exception for all Splitly errors."""

    pass


class InputValidationError(SplitlyError):
    """Raised when caller input is missing or malformed."""

    pass


class ExtractionError(SplitlyError):
    """Raised when the language model yields no usable expense data."""

    pass


class DegenerateLedgerError(SplitlyError):
    """Raised when a scenario leaves nobody to split an expense with."""

    pass


class PersistenceError(SplitlyError):
    """Raised when the scenario store cannot be read or written."""

    pass


class BatchFailedError(SplitlyError):
    """Raised when no entry of a scenario batch could be created."""

    def __init__(self, failures: "list[ScenarioFailure]", message: str | None = None):
        self.failures = failures
        super().__init__(message or "No valid scenarios created")
