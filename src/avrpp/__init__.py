"""
avrpp - Pseudo-Assembly Preprocessor for AVR
============================================

This package rewrites sources that mix plain AVR assembly with a small
embedded pseudo-assembly notation. Every ``$`` sentence is expanded into
an equivalent AVR instruction sequence; every other line is copied
through unchanged and in order.

Main Components
---------------
- **lexer**: token classifier (register, immediate, mem[...], comparator,
  operator, label)
- **sentence**: line classifier (unary, binary, conditional, or pass-through)
- **codegen**: AVR instruction selection with a fixed scratch register set
- **transpiler**: line-by-line driver, statistics and atomic output
- **cli**: the ``avrpp`` command

Quick Start
-----------
    >>> from avrpp import transpile
    >>> print(transpile("$ r1 + r2 -> r3"))
    push r24
    push r25
    mov r24, r1
    mov r25, r2
    add r24, r25
    mov r3, r24
    pop r25
    pop r24

Or use the command-line tool:
    $ avrpp -i main.pasm -o main.asm
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from avrpp.config import ScratchRegisters, TranspilerConfig
from avrpp.errors import (
    AvrppError,
    SourceLocation,
    TranspileError,
    UnsupportedOperandError,
    UnsupportedOperatorError,
    TooManyErrors,
    ErrorCollector,
)
from avrpp.lexer import Token, TokenType, classify_token, parse_literal
from avrpp.sentence import Sentence, SentenceKind, classify_line
from avrpp.codegen import CodeGenerator
from avrpp.transpiler import Transpiler, TranspileStats, transpile, transpile_file
from avrpp.report import format_report

__all__ = [
    "__version__",
    # Configuration
    "ScratchRegisters",
    "TranspilerConfig",
    # Exception hierarchy
    "AvrppError",
    "SourceLocation",
    "TranspileError",
    "UnsupportedOperandError",
    "UnsupportedOperatorError",
    "TooManyErrors",
    "ErrorCollector",
    # Classification
    "Token",
    "TokenType",
    "classify_token",
    "parse_literal",
    "Sentence",
    "SentenceKind",
    "classify_line",
    # Generation
    "CodeGenerator",
    "Transpiler",
    "TranspileStats",
    "transpile",
    "transpile_file",
    "format_report",
]
