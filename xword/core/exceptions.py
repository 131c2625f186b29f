"""Custom exception hierarchy for the crossword editor and autofill engine."""


class XWordError(Exception):
    """Base exception for editor and engine failures."""


class LexiconLoadError(XWordError):
    """Raised when the word list cannot be read."""


class GridFormatError(XWordError):
    """Raised when a serialized grid or layout is malformed."""


class InfeasibleGridError(XWordError):
    """Raised when backtracking has no step left to unwind."""


class EditLockedError(XWordError):
    """Raised when the grid is edited while an autofill run owns it."""


class ValidationError(XWordError):
    """Raised when the grid integrity checks fail."""
