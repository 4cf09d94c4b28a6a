"""Custom exceptions for codesplice."""

from typing import Optional


class CodeSpliceError(Exception):
    """Base exception for all codesplice errors."""

    pass


class SourceParseError(CodeSpliceError):
    """Exception raised when a source file cannot be parsed into a syntax tree."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        """
        Initialize parse error.

        Args:
            message: Error message
            file_path: Optional path of the file that failed to parse
        """
        super().__init__(message)
        self.file_path = file_path


class InvalidSpanError(CodeSpliceError, ValueError):
    """Exception raised for a line range with start > end or start < 1."""

    pass


class InvalidFindingError(CodeSpliceError, ValueError):
    """Exception raised for a finding that does not point at a real line."""

    pass


class BudgetError(CodeSpliceError, ValueError):
    """Exception raised for a non-positive batch character budget."""

    pass
