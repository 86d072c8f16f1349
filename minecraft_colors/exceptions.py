"""Package-specific exception types."""

from __future__ import annotations


class HighlightError(ValueError):
    """Base class for document highlighting errors.

    Scanning and resolving a single line never raise; these errors come from
    the limits enforced when a whole document is highlighted.
    """


class LineTooLongError(HighlightError):
    """Raised when a line exceeds the configured maximum length.

    Args:
        line_number: One-based index of the offending line.
        max_line_length: Maximum allowed line length in characters.
    """

    def __init__(self, line_number: int, max_line_length: int):
        self.line_number = line_number
        self.max_line_length = max_line_length
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Line {self.line_number} exceeds maximum allowed length "
            f"of {self.max_line_length} characters"
        )
