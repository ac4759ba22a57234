"""
avrpp Error Hierarchy
=====================

This module defines the exception hierarchy for the AVR pseudo-assembly
preprocessor. All exceptions inherit from AvrppError, allowing callers to
catch every transpiler-related error with a single except clause.

Exception Hierarchy
-------------------
AvrppError (base)
└── TranspileError (code generation)
    ├── UnsupportedOperandError - operand types with no instruction template
    ├── UnsupportedOperatorError - operator with no opcode mapping
    └── TooManyErrors - error limit reached

File read and write failures are not wrapped: they surface as the built-in
OSError subclasses (FileNotFoundError, PermissionError, ...) and abort the run.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class AvrppError(Exception):
    """
    Base exception for all avrpp errors.

        try:
            transpiler.transpile_file("main.pasm")
        except AvrppError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Transpiler Exceptions
# =============================================================================

class TranspileError(AvrppError):
    """
    Base exception for errors raised while expanding a DSL sentence.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            main.pasm:4:5: error: cannot move immediate into immediate
                $ 5 -> 6
                ^
            hint: destination must be a register or mem[...]
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class UnsupportedOperandError(TranspileError):
    """
    Operand types have no instruction template.

    Raised by the code generator when a sentence combines operand types
    that no template covers, for example a label as the source of a move
    or a register as a branch target.
    """

    def __init__(
        self,
        form: str,
        operand_types: tuple[str, ...],
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.form = form
        self.operand_types = operand_types
        types_str = ", ".join(operand_types)
        super().__init__(
            f"unsupported operand types for {form} sentence: ({types_str})",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnsupportedOperatorError(TranspileError):
    """
    Operator is accepted by the grammar but has no opcode.

    Example:
        $ r1 / r2 -> r3   ; Error: no divide instruction on AVR
    """

    def __init__(
        self,
        operator: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        supported: Optional[list[str]] = None,
    ):
        self.operator = operator
        self.supported = supported or []

        hint = None
        if self.supported:
            hint = f"supported operators: {' '.join(self.supported)}"

        super().__init__(
            f"operator '{operator}' has no instruction mapping",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The transpiler keeps going after a bad sentence so that every problem
    in a file is reported in one run.

    Example:
        collector = ErrorCollector(max_errors=100)
        collector.add(UnsupportedOperatorError("/"))

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[TranspileError] = []
        self.warnings: list[str] = []
        self.max_errors = max_errors

    def add(self, error: TranspileError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"too many errors ({self.max_errors}), stopping")

    def add_warning(self, message: str, location: Optional[SourceLocation] = None) -> None:
        """Add a warning message, prefixed with its location when known."""
        if location is not None:
            message = f"{location}: warning: {message}"
        self.warnings.append(message)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def report(self) -> str:
        """
        Format all errors and warnings for display.

        Returns:
            Formatted string with all errors and warnings
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  {warning}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors and warnings."""
        self.errors.clear()
        self.warnings.clear()


class TooManyErrors(TranspileError):
    """Raised when the error limit of an ErrorCollector is reached."""

    def __init__(self, message: str = "too many errors"):
        super().__init__(message)
