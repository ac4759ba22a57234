"""
Pseudo-Assembly Token Classifier
================================

This module infers the semantic type of a single token of the embedded
pseudo-assembly notation. Classification is a pure function of the token
text: the same text always yields the same type.

Token Types
-----------
Types are tried in a fixed order and the first match wins:

| Order | Type       | Examples                          |
|-------|------------|-----------------------------------|
| 1     | REGISTER   | r0, r5, r05, r31                  |
| 2     | ADDRESS    | mem[0x20], mem[$20], mem[32]      |
| 3     | COMPARATOR | >=, =<, >, <, <=, ==, !=          |
| 4     | OPERATOR   | +, -, *, &, |, /, ^, !            |
| 5     | IMMEDIATE  | 0x20, $20, 20h, 0b100000, 040, 32 |
| 6     | LABEL      | loop1, end, _start                |
| 7     | EMPTY      | anything else                     |

The order matters: the literal grammar overlaps with the label grammar
(``20h`` and ``$20`` are valid label text), so ADDRESS is tried before
IMMEDIATE and IMMEDIATE before LABEL.

Number Formats
--------------
| Format      | Form     | Example | Value |
|-------------|----------|---------|-------|
| Hexadecimal | 0x / $   | 0x20    | 32    |
| Hexadecimal | h suffix | 20h     | 32    |
| Binary      | 0b       | 0b100000| 32    |
| Octal       | leading 0| 040     | 32    |
| Decimal     | (none)   | 32      | 32    |

Literal text is never re-encoded; generated code carries it verbatim.

Example
-------
>>> from avrpp.lexer import Token
>>> Token.from_text("mem[0x20]")
Token(ADDRESS, '0x20')
>>> Token.from_text("0x20").numeric_value
32
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import re


# =============================================================================
# Lexical Patterns
# =============================================================================
# Shared with avrpp.sentence, which embeds them in the line grammars.

LITERAL_PATTERN = (
    r"(?P<hex>0x[0-9a-f]+)"
    r"|(?P<dollar>\$[0-9a-f]+)"
    r"|(?P<suffix>[0-9a-f]+h)"
    r"|(?P<bin>0b[01]+)"
    r"|(?P<oct>0[0-7]+)"
    r"|(?P<dec>[0-9]+)"
)

# Same alternatives without named groups, for embedding
LITERAL = r"0x[0-9a-f]+|\$[0-9a-f]+|[0-9a-f]+h|0b[01]+|0[0-7]+|[0-9]+"
REGISTER = r"r(?:[0-2]?[0-9]|3[01])"
ADDRESS = rf"mem\[(?:{LITERAL})\]"
LABEL_CHARS = r"[0-9a-z_\-$.]"

COMPARATORS = (">=", "=<", ">", "<", "<=", "==", "!=")
OPERATORS = ("+", "-", "*", "&", "|", "/", "^", "!")

_REGISTER_RE = re.compile(REGISTER, re.IGNORECASE)
_ADDRESS_RE = re.compile(rf"mem\[(?P<literal>{LITERAL})\]", re.IGNORECASE)
_LITERAL_RE = re.compile(LITERAL_PATTERN, re.IGNORECASE)
_LABEL_RE = re.compile(rf"{LABEL_CHARS}{{1,16}}", re.IGNORECASE)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Semantic type of a token, in classification order."""

    REGISTER = "register"
    ADDRESS = "address"
    COMPARATOR = "comparator"
    OPERATOR = "operator"
    IMMEDIATE = "immediate"
    LABEL = "label"
    EMPTY = "empty"


def classify_token(text: str) -> TokenType:
    """
    Return the type of a token's text.

    Args:
        text: Raw token text (surrounding whitespace is not stripped)

    Returns:
        The first TokenType whose grammar matches the whole text
    """
    if _REGISTER_RE.fullmatch(text):
        return TokenType.REGISTER
    if _ADDRESS_RE.fullmatch(text):
        return TokenType.ADDRESS
    if text in COMPARATORS:
        return TokenType.COMPARATOR
    if text in OPERATORS:
        return TokenType.OPERATOR
    if _LITERAL_RE.fullmatch(text):
        return TokenType.IMMEDIATE
    if _LABEL_RE.fullmatch(text):
        return TokenType.LABEL
    return TokenType.EMPTY


def parse_literal(text: str) -> Optional[int]:
    """
    Decode a numeric literal in any accepted form.

    Returns:
        The integer value, or None if the text is not a literal
    """
    match = _LITERAL_RE.fullmatch(text)
    if match is None:
        return None

    form = match.lastgroup
    if form == "hex":
        return int(text[2:], 16)
    if form == "dollar":
        return int(text[1:], 16)
    if form == "suffix":
        return int(text[:-1], 16)
    if form == "bin":
        return int(text[2:], 2)
    if form == "oct":
        return int(text[1:], 8)
    return int(text, 10)


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A classified lexical unit.

    Attributes:
        value: Token text; for ADDRESS tokens only the literal inside mem[...]
        type: The TokenType classification
    """
    value: str
    type: TokenType

    @classmethod
    def from_text(cls, text: str) -> "Token":
        """Classify text and build the token, unwrapping mem[...] addresses."""
        token_type = classify_token(text)
        if token_type is TokenType.ADDRESS:
            text = _ADDRESS_RE.fullmatch(text).group("literal")
        return cls(text, token_type)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r})"

    def __str__(self) -> str:
        return self.value

    @property
    def register_index(self) -> Optional[int]:
        """Register number for REGISTER tokens, None otherwise."""
        if self.type is not TokenType.REGISTER:
            return None
        return int(self.value[1:])

    @property
    def numeric_value(self) -> Optional[int]:
        """Decoded literal for IMMEDIATE and ADDRESS tokens, None otherwise."""
        if self.type not in (TokenType.IMMEDIATE, TokenType.ADDRESS):
            return None
        return parse_literal(self.value)
