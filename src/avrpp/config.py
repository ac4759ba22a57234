"""
avrpp - Configuration
=====================

Scratch register convention and transpiler settings. Configuration can
come from:
- Default values (defined here)
- Environment variables (TranspilerConfig.from_env)
- Command-line flags (applied by the CLI on top of the above)

Scratch Register Convention
---------------------------
| Role        | Default  | Usage                                       |
|-------------|----------|---------------------------------------------|
| operand A   | r24      | first operand of binary and conditional     |
| operand B   | r25      | second operand of binary and conditional    |
| staging     | r25      | value in transit for immediate/mem -> mem   |
| pointer     | X        | r27:r26, indirect load/store of mem[...]    |

Every template in avrpp.codegen refers to these roles symbolically, so
the convention changes here and nowhere else.
"""

from dataclasses import dataclass, field
import os


# AVR pointer registers: name -> (low register, high register)
POINTER_PAIRS: dict[str, tuple[int, int]] = {
    "X": (26, 27),
    "Y": (28, 29),
    "Z": (30, 31),
}


@dataclass(frozen=True)
class ScratchRegisters:
    """
    The general-purpose registers reserved while expanding DSL sentences.

    Attributes:
        operand_a: Register that holds op1 of binary and conditional sentences
        operand_b: Register that holds op2 of binary and conditional sentences
        staging: Register that carries a value between two memory accesses
        pointer: Name of the pointer pair used for mem[...] operands
    """
    operand_a: int = 24
    operand_b: int = 25
    staging: int = 25
    pointer: str = "X"

    def __post_init__(self) -> None:
        if self.pointer.upper() not in POINTER_PAIRS:
            valid = ", ".join(POINTER_PAIRS)
            raise ValueError(f"unknown pointer pair '{self.pointer}' (valid: {valid})")
        object.__setattr__(self, "pointer", self.pointer.upper())

    @classmethod
    def for_pointer(cls, pointer: str) -> "ScratchRegisters":
        """Return the default convention using another pointer pair."""
        return cls(pointer=pointer)

    @property
    def pointer_low(self) -> int:
        return POINTER_PAIRS[self.pointer][0]

    @property
    def pointer_high(self) -> int:
        return POINTER_PAIRS[self.pointer][1]

    @property
    def pointer_registers(self) -> frozenset[int]:
        return frozenset(POINTER_PAIRS[self.pointer])

    @staticmethod
    def name(index: int) -> str:
        """Register name as emitted in generated code ('r24')."""
        return f"r{index}"


@dataclass
class TranspilerConfig:
    """
    Settings for one transpiler run.

    Attributes:
        scratch: Scratch register convention used by the code generator
        max_errors: Errors collected before the run is abandoned
        report: Print the statistics table after a CLI run
    """
    scratch: ScratchRegisters = field(default_factory=ScratchRegisters)
    max_errors: int = 100
    report: bool = True

    @classmethod
    def from_env(cls) -> "TranspilerConfig":
        """
        Create TranspilerConfig from environment variables.

        Environment variables (all optional):
            AVRPP_POINTER: Pointer pair for mem[...] operands (x, y or z)
            AVRPP_MAX_ERRORS: Error limit (integer)
            AVRPP_NO_REPORT: Any non-empty value disables the report

        Returns:
            TranspilerConfig with values from environment variables
        """
        config = cls()

        if pointer := os.environ.get("AVRPP_POINTER"):
            if pointer.upper() in POINTER_PAIRS:
                config.scratch = ScratchRegisters.for_pointer(pointer)

        if max_errors := os.environ.get("AVRPP_MAX_ERRORS"):
            try:
                config.max_errors = max(1, int(max_errors))
            except ValueError:
                pass  # Ignore invalid values

        if os.environ.get("AVRPP_NO_REPORT"):
            config.report = False

        return config
