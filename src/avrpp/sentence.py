"""
Pseudo-Assembly Line Classifier
===============================

This module classifies one source line as a DSL sentence or as pass-through
content. DSL sentences start with the ``$`` sigil and come in three forms:

    $ <op1> -> <dest>                            unary (move/store)
    $ <op1> <operator> <op2> -> <dest>           binary (compute and store)
    $ if <op1> <comparator> <op2> goto <label>   conditional (branch)

where op1/op2 are a register, an immediate literal or ``mem[<literal>]`` and
dest is a register or ``mem[<literal>]``. Each form accepts leading
indentation and a trailing ``; comment``.

Lines matching none of the forms are pass-through, sub-classified as
comment (``; ...``), native (any other text, assumed to be valid target
assembly) or blank (spaces and tabs only).

Grammar Precedence
------------------
The grammars are kept in an explicit ordered table and tried top to bottom;
the first one that matches the whole line decides the sentence kind:

    1. unary   2. binary   3. conditional   4. comment   5. native   6. blank

Example
-------
>>> from avrpp.sentence import classify_line
>>> sentence = classify_line("    $ r1 + r2 -> r3 ; sum")
>>> sentence.kind
<SentenceKind.BINARY: 'binary'>
>>> sentence.roles["operator"]
Token(OPERATOR, '+')
>>> sentence.indent
'    '
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import re

from avrpp.errors import SourceLocation
from avrpp.lexer import Token, REGISTER, LITERAL, ADDRESS, LABEL_CHARS


# =============================================================================
# Sentence Kinds
# =============================================================================

class SentenceKind(Enum):
    """Kind of a source line."""

    UNARY = "unary"
    BINARY = "binary"
    CONDITIONAL = "conditional"
    COMMENT = "comment"
    NATIVE = "native"
    BLANK = "blank"

    @property
    def is_dsl(self) -> bool:
        """True for the kinds that are expanded by the code generator."""
        return self in (SentenceKind.UNARY, SentenceKind.BINARY, SentenceKind.CONDITIONAL)


# =============================================================================
# Line Grammars
# =============================================================================

_WS = r"[ \t]*"
_BLANK = r"(?P<blank>[ \t]*)"
_COMMENT = r"(?P<comment>;.*)?"
_OPERAND = rf"(?:{REGISTER}|{LITERAL}|{ADDRESS})"
_DEST = rf"(?:{REGISTER}|{ADDRESS})"
_OPERATOR = r"[-+*&|/^!]"
_COMPARATOR = r">=|=<|<=|==|!=|>|<"

_UNARY = (
    rf"{_BLANK}\${_WS}(?P<op1>{_OPERAND}){_WS}->{_WS}(?P<dest>{_DEST})"
    rf"{_WS}{_COMMENT}"
)
_BINARY = (
    rf"{_BLANK}\${_WS}(?P<op1>{_OPERAND}){_WS}(?P<operator>{_OPERATOR})"
    rf"{_WS}(?P<op2>{_OPERAND}){_WS}->{_WS}(?P<dest>{_DEST}){_WS}{_COMMENT}"
)
_CONDITIONAL = (
    rf"{_BLANK}\${_WS}if{_WS}(?P<op1>{_OPERAND}){_WS}(?P<operator>{_COMPARATOR})"
    rf"{_WS}(?P<op2>{_OPERAND}){_WS}(?P<action>goto){_WS}"
    rf"(?P<dest>{LABEL_CHARS}{{1,64}}){_WS}{_COMMENT}"
)
_COMMENT_LINE = rf"{_BLANK}(?P<comment>;.*)"
_NATIVE_LINE = rf"{_BLANK}[^ \t].*"
_BLANK_LINE = _BLANK

# Ordered (kind, grammar) table; the first full match wins
GRAMMARS: tuple[tuple[SentenceKind, re.Pattern], ...] = (
    (SentenceKind.UNARY, re.compile(_UNARY, re.IGNORECASE)),
    (SentenceKind.BINARY, re.compile(_BINARY, re.IGNORECASE)),
    (SentenceKind.CONDITIONAL, re.compile(_CONDITIONAL, re.IGNORECASE)),
    (SentenceKind.COMMENT, re.compile(_COMMENT_LINE)),
    (SentenceKind.NATIVE, re.compile(_NATIVE_LINE)),
    (SentenceKind.BLANK, re.compile(_BLANK_LINE)),
)


# =============================================================================
# Sentence Data Class
# =============================================================================

@dataclass
class Sentence:
    """
    One classified input line.

    Attributes:
        raw_text: The line as read (without its line terminator)
        kind: The SentenceKind classification
        roles: Role name (blank, op1, operator, op2, dest, action, comment)
               to Token, holding only the roles present in this kind
        line_number: 1-based line number in the source
        filename: Source name for diagnostics
    """
    raw_text: str
    kind: SentenceKind
    roles: dict[str, Token] = field(default_factory=dict)
    line_number: int = 1
    filename: str = "<input>"

    @property
    def native(self) -> bool:
        """True for pass-through lines (comment, native, blank)."""
        return not self.kind.is_dsl

    @property
    def indent(self) -> str:
        """Leading whitespace captured from the line."""
        blank = self.roles.get("blank")
        return blank.value if blank is not None else ""

    @property
    def location(self) -> SourceLocation:
        """Location of the first non-blank character, for diagnostics."""
        return SourceLocation(self.filename, self.line_number, len(self.indent) + 1)

    def role(self, name: str) -> Optional[Token]:
        """Return the token for a role, or None if the kind has no such role."""
        return self.roles.get(name)


def classify_line(line: str, line_number: int = 1, filename: str = "<input>") -> Sentence:
    """
    Classify a single source line.

    A trailing carriage return is dropped; nothing else is altered. Role
    tokens of DSL sentences are built from lowercased text, so generated
    code is lowercase whatever the source casing.

    Args:
        line: One line of source text, without its newline
        line_number: 1-based line number (for diagnostics)
        filename: Source name (for diagnostics)

    Returns:
        The classified Sentence
    """
    if line.endswith("\r"):
        line = line[:-1]

    for kind, grammar in GRAMMARS:
        match = grammar.fullmatch(line)
        if match is None:
            continue

        roles = {}
        for name, text in match.groupdict().items():
            if text is None:
                continue
            if kind.is_dsl:
                text = text.lower()
            roles[name] = Token.from_text(text)

        return Sentence(line, kind, roles, line_number, filename)

    # Not reached in practice: native or blank accepts every line
    return Sentence(line, SentenceKind.NATIVE, {}, line_number, filename)
