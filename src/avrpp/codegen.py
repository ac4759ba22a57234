"""
AVR Code Generator for Pseudo-Assembly Sentences
================================================

This module expands each classified DSL sentence into a sequence of AVR
(ATmega328P and similar) instructions. Selection is driven entirely by
the token types of the sentence's operands; every sentence expands
independently of its neighbours.

Code Generation Strategy
------------------------
Unary sentences (``op1 -> dest``) map each supported (op1, dest) type pair
to a fixed template:

| op1       | dest     | Template                                        |
|-----------|----------|-------------------------------------------------|
| register  | register | mov                                             |
| immediate | register | ldi                                             |
| address   | register | save pointer, load pointer, ld, restore pointer |
| register  | address  | save pointer, load pointer, st, restore pointer |
| immediate | address  | save pointer + staging, ldi, st, restore        |
| address   | address  | save pointer + staging, ld, st, restore         |

Binary sentences (``op1 <op> op2 -> dest``) stage op1 and op2 into the two
operand scratch registers whatever their type, so one opcode works for all
nine operand combinations:

    push A / push B
    <stage op1 into A> / <stage op2 into B>
    <opcode> A, B
    <write A to dest>
    pop B / pop A

Conditional sentences (``if op1 <cmp> op2 goto label``) stage the operands
the same way, compare, restore the scratch registers and branch. ``cp``
only exposes carry and zero relative to a fixed operand order, so some
comparators swap the operands:

| Comparator | Compare | Branch |
|------------|---------|--------|
| ==         | A, B    | breq   |
| !=         | A, B    | brne   |
| >=         | A, B    | brcc   |
| <= / =<    | B, A    | brcc   |
| >          | B, A    | brcs   |
| <          | A, B    | brcs   |

``pop`` leaves SREG untouched, so the flags set by ``cp`` survive the
restore and reach the branch. The branch target is emitted as
written; labels are resolved by the assembler.

Register Usage
--------------
The scratch registers (A, B, staging, pointer pair) come from
avrpp.config.ScratchRegisters; the defaults are r24, r25, r25 and X
(r27:r26). Every push has exactly one matching pop, in LIFO order, and
nested pointer-pair blocks never overlap. Register operands are emitted in
canonical form, so ``r05`` becomes ``r5``.

Memory operands load the pointer pair with ``high(<literal>)`` and
``low(<literal>)`` and access memory indirectly through it.

Usage
-----
>>> from avrpp.sentence import classify_line
>>> from avrpp.codegen import CodeGenerator
>>> gen = CodeGenerator()
>>> gen.generate(classify_line("  $ 5 -> r2"))
['  ldi r2, 5']
"""

from typing import Optional
import logging

from avrpp.config import ScratchRegisters
from avrpp.errors import (
    ErrorCollector,
    UnsupportedOperandError,
    UnsupportedOperatorError,
)
from avrpp.lexer import Token, TokenType
from avrpp.sentence import Sentence, SentenceKind

logger = logging.getLogger(__name__)


# Operand types that can be staged into a register
STAGEABLE = frozenset({TokenType.REGISTER, TokenType.IMMEDIATE, TokenType.ADDRESS})

# Destination types for unary and binary sentences
WRITABLE = frozenset({TokenType.REGISTER, TokenType.ADDRESS})


class CodeGenerator:
    """
    Generates AVR instruction sequences from DSL sentences.

    Attributes:
        scratch: Scratch register convention used by every template
        collector: Optional ErrorCollector that receives aliasing warnings
    """

    # Binary operator -> two-operand AVR opcode
    BINARY_OPCODES = {
        "+": "add",
        "-": "sub",
        "*": "mul",
        "&": "and",
        "|": "or",
        "^": "eor",
    }

    # Comparator -> (compare B against A, branch mnemonic)
    BRANCHES = {
        "==": (False, "breq"),
        "!=": (False, "brne"),
        ">=": (False, "brcc"),
        "<=": (True, "brcc"),
        "=<": (True, "brcc"),
        ">": (True, "brcs"),
        "<": (False, "brcs"),
    }

    def __init__(
        self,
        scratch: Optional[ScratchRegisters] = None,
        collector: Optional[ErrorCollector] = None,
    ):
        self.scratch = scratch or ScratchRegisters()
        self.collector = collector
        self._output: list[str] = []
        self._sentence: Optional[Sentence] = None

        self._unary_templates = {
            (TokenType.REGISTER, TokenType.REGISTER): self._move_register,
            (TokenType.IMMEDIATE, TokenType.REGISTER): self._move_immediate,
            (TokenType.ADDRESS, TokenType.REGISTER): self._load_from_memory,
            (TokenType.REGISTER, TokenType.ADDRESS): self._store_register,
            (TokenType.IMMEDIATE, TokenType.ADDRESS): self._store_immediate,
            (TokenType.ADDRESS, TokenType.ADDRESS): self._copy_memory,
        }

    def generate(self, sentence: Sentence) -> list[str]:
        """
        Expand one DSL sentence.

        Args:
            sentence: A unary, binary or conditional sentence

        Returns:
            Instruction lines, each prefixed with the sentence's indentation

        Raises:
            ValueError: If the sentence is a pass-through line
            UnsupportedOperandError: If no template covers the operand types
            UnsupportedOperatorError: If the operator has no opcode
        """
        if sentence.native:
            raise ValueError(f"cannot generate code for a {sentence.kind.value} line")

        self._output = []
        self._sentence = sentence

        if sentence.kind is SentenceKind.UNARY:
            self._generate_unary(sentence)
        elif sentence.kind is SentenceKind.BINARY:
            self._generate_binary(sentence)
        else:
            self._generate_conditional(sentence)

        logger.debug(
            f"line {sentence.line_number}: {sentence.kind.value} sentence "
            f"-> {len(self._output)} instructions"
        )
        indent = sentence.indent
        return [indent + line for line in self._output]

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, mnemonic: str, *operands: str) -> None:
        """Emit an instruction with optional operands."""
        if operands:
            self._output.append(f"{mnemonic} {', '.join(operands)}")
        else:
            self._output.append(mnemonic)

    def _save(self, *registers: int) -> None:
        """Push registers in the given order."""
        for register in registers:
            self._emit("push", self.scratch.name(register))

    def _restore(self, *registers: int) -> None:
        """Pop registers saved by the matching _save call (reverse order)."""
        for register in reversed(registers):
            self._emit("pop", self.scratch.name(register))

    def _load_pointer(self, literal: str) -> None:
        """Point the pointer pair at a memory address."""
        self._emit("ldi", self.scratch.name(self.scratch.pointer_high), f"high({literal})")
        self._emit("ldi", self.scratch.name(self.scratch.pointer_low), f"low({literal})")

    def _register(self, token: Token) -> str:
        """Canonical name of a register operand (r05 -> r5)."""
        return self.scratch.name(token.register_index)

    def _pointer_pair(self) -> tuple[int, int]:
        return (self.scratch.pointer_low, self.scratch.pointer_high)

    def _load_indirect(self, literal: str, target: str) -> None:
        """Load a memory byte into a register, preserving the pointer pair."""
        self._save(*self._pointer_pair())
        self._load_pointer(literal)
        self._emit("ld", target, self.scratch.pointer)
        self._restore(*self._pointer_pair())

    def _store_indirect(self, literal: str, source: str) -> None:
        """Store a register to a memory byte, preserving the pointer pair."""
        self._save(*self._pointer_pair())
        self._load_pointer(literal)
        self._emit("st", self.scratch.pointer, source)
        self._restore(*self._pointer_pair())

    def _stage(self, operand: Token, register: int) -> None:
        """Bring a register, immediate or memory operand into a scratch register."""
        target = self.scratch.name(register)
        if operand.type is TokenType.REGISTER:
            self._emit("mov", target, self._register(operand))
        elif operand.type is TokenType.IMMEDIATE:
            self._emit("ldi", target, operand.value)
        else:
            self._load_indirect(operand.value, target)

    def _write_result(self, dest: Token, register: int) -> None:
        """Copy a scratch register to a register or memory destination."""
        source = self.scratch.name(register)
        if dest.type is TokenType.REGISTER:
            self._emit("mov", self._register(dest), source)
        else:
            self._store_indirect(dest.value, source)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _unsupported(self, form: str, *operands: Token, hint: Optional[str] = None):
        sentence = self._sentence
        return UnsupportedOperandError(
            form,
            tuple(token.type.value for token in operands),
            location=sentence.location,
            source_line=sentence.raw_text,
            hint=hint,
        )

    def _warn(self, message: str) -> None:
        logger.debug(f"line {self._sentence.line_number}: {message}")
        if self.collector is not None:
            self.collector.add_warning(message, self._sentence.location)

    def _check_operands(self, form: str, op1: Token, op2: Token, dest: Token) -> None:
        if op1.type not in STAGEABLE or op2.type not in STAGEABLE:
            raise self._unsupported(
                form, op1, op2, dest,
                hint="operands must be registers, immediates or mem[...]",
            )

    # =========================================================================
    # Unary Sentences: op1 -> dest
    # =========================================================================

    def _generate_unary(self, sentence: Sentence) -> None:
        op1 = sentence.roles["op1"]
        dest = sentence.roles["dest"]

        template = self._unary_templates.get((op1.type, dest.type))
        if template is None:
            raise self._unsupported(
                "unary", op1, dest,
                hint="move from a register, immediate or mem[...] "
                     "into a register or mem[...]",
            )
        template(op1, dest)

    def _move_register(self, op1: Token, dest: Token) -> None:
        self._emit("mov", self._register(dest), self._register(op1))

    def _move_immediate(self, op1: Token, dest: Token) -> None:
        self._emit("ldi", self._register(dest), op1.value)

    def _load_from_memory(self, op1: Token, dest: Token) -> None:
        if dest.register_index in self.scratch.pointer_registers:
            self._warn(f"{dest.value} is part of the pointer pair and is restored after the load")
        self._load_indirect(op1.value, self._register(dest))

    def _store_register(self, op1: Token, dest: Token) -> None:
        if op1.register_index in self.scratch.pointer_registers:
            self._warn(f"{op1.value} is part of the pointer pair and holds the address when stored")
        self._store_indirect(dest.value, self._register(op1))

    def _store_immediate(self, op1: Token, dest: Token) -> None:
        staging = self.scratch.staging
        saved = (*self._pointer_pair(), staging)

        self._save(*saved)
        self._emit("ldi", self.scratch.name(staging), op1.value)
        self._load_pointer(dest.value)
        self._emit("st", self.scratch.pointer, self.scratch.name(staging))
        self._restore(*saved)

    def _copy_memory(self, op1: Token, dest: Token) -> None:
        staging = self.scratch.staging
        saved = (*self._pointer_pair(), staging)

        self._save(*saved)
        self._load_pointer(op1.value)
        self._emit("ld", self.scratch.name(staging), self.scratch.pointer)
        self._load_pointer(dest.value)
        self._emit("st", self.scratch.pointer, self.scratch.name(staging))
        self._restore(*saved)

    # =========================================================================
    # Binary Sentences: op1 <operator> op2 -> dest
    # =========================================================================

    def _generate_binary(self, sentence: Sentence) -> None:
        op1 = sentence.roles["op1"]
        op2 = sentence.roles["op2"]
        dest = sentence.roles["dest"]
        operator = sentence.roles["operator"].value

        opcode = self.BINARY_OPCODES.get(operator)
        if opcode is None:
            raise UnsupportedOperatorError(
                operator,
                location=sentence.location,
                source_line=sentence.raw_text,
                supported=list(self.BINARY_OPCODES),
            )
        self._check_operands("binary", op1, op2, dest)
        if dest.type not in WRITABLE:
            raise self._unsupported(
                "binary", op1, op2, dest,
                hint="destination must be a register or mem[...]",
            )

        a, b = self.scratch.operand_a, self.scratch.operand_b
        self._check_operand_aliasing(op1, op2)
        if dest.register_index in (a, b):
            self._warn(
                f"result in {dest.value} is overwritten when the scratch "
                f"registers are restored"
            )

        self._save(a, b)
        self._stage(op1, a)
        self._stage(op2, b)
        self._emit(opcode, self.scratch.name(a), self.scratch.name(b))
        self._write_result(dest, a)
        self._restore(a, b)

    def _check_operand_aliasing(self, op1: Token, op2: Token) -> None:
        a = self.scratch.operand_a
        if op2.register_index == a and op1.register_index != a:
            self._warn(f"{op2.value} is overwritten by op1 before it is read")

    # =========================================================================
    # Conditional Sentences: if op1 <comparator> op2 goto dest
    # =========================================================================

    def _generate_conditional(self, sentence: Sentence) -> None:
        op1 = sentence.roles["op1"]
        op2 = sentence.roles["op2"]
        dest = sentence.roles["dest"]
        comparator = sentence.roles["operator"].value

        branch = self.BRANCHES.get(comparator)
        if branch is None:
            raise UnsupportedOperatorError(
                comparator,
                location=sentence.location,
                source_line=sentence.raw_text,
                supported=list(self.BRANCHES),
            )
        self._check_operands("conditional", op1, op2, dest)

        swapped, mnemonic = branch
        a, b = self.scratch.operand_a, self.scratch.operand_b
        self._check_operand_aliasing(op1, op2)

        self._save(a)
        self._stage(op1, a)
        self._save(b)
        self._stage(op2, b)
        if swapped:
            self._emit("cp", self.scratch.name(b), self.scratch.name(a))
        else:
            self._emit("cp", self.scratch.name(a), self.scratch.name(b))
        self._restore(b)
        self._restore(a)
        self._emit(mnemonic, dest.value)
