"""
avrpp - Main Interface
======================

This module provides the Transpiler class, the primary interface for
rewriting pseudo-assembly sources. It splits the source into lines,
classifies each one, expands DSL sentences through the code generator and
passes every other line through untouched, in source order.

Example Usage
-------------
>>> from avrpp import Transpiler
>>>
>>> tp = Transpiler()
>>> print(tp.transpile_string('''
...     ldi r16, 1        ; native line, kept as is
...     $ r16 + 4 -> r17
... '''))
>>>
>>> stats = tp.get_statistics()
>>> print(f"{stats.transpiled} sentences expanded")
>>>
>>> tp.write_output("main.asm")

Processing Model
----------------
- Single pass, one line at a time; no state is carried between lines.
- Pass-through lines (comments, blanks, native assembly) are copied
  verbatim. A trailing carriage return is dropped, so CRLF input yields LF
  output.
- A DSL sentence that cannot be expanded is reported through the error
  collector and contributes no output lines. Processing continues with
  the next line so every problem in the file is reported at once.
- Running the transpiler on its own output changes nothing: generated
  instructions carry no ``$`` sigil.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging
import os
import tempfile

from avrpp.codegen import CodeGenerator
from avrpp.config import TranspilerConfig
from avrpp.errors import ErrorCollector, TranspileError
from avrpp.sentence import Sentence, SentenceKind, classify_line

logger = logging.getLogger(__name__)


# =============================================================================
# Statistics
# =============================================================================

@dataclass
class TranspileStats:
    """
    Observational counts for one run. They never affect generated output.

    Attributes:
        input_name: Source file name (no directory)
        output_name: Output file name (no directory), empty until written
        sentences: Number of input lines
        instructions_in: Input lines that are neither blank nor comment
        instructions_out: Output lines that are neither blank nor comment
        transpiled: DSL sentences in the input
        transpiled_out: Output instructions produced by expansion
        native: Native assembly lines passed through
        input_size: Input size in bytes
        output_size: Output size in bytes
    """
    input_name: str = "<input>"
    output_name: str = ""
    sentences: int = 0
    instructions_in: int = 0
    instructions_out: int = 0
    transpiled: int = 0
    transpiled_out: int = 0
    native: int = 0
    input_size: int = 0
    output_size: int = 0

    @property
    def input_size_kb(self) -> float:
        return self.input_size / 1024

    @property
    def output_size_kb(self) -> float:
        return self.output_size / 1024


# =============================================================================
# Transpiler
# =============================================================================

class Transpiler:
    """
    Rewrites DSL sentences in a source into AVR instructions.

    Attributes:
        config: Scratch register convention and error limit
        verbose: If True, log progress at INFO level
    """

    def __init__(self, config: Optional[TranspilerConfig] = None, verbose: bool = False):
        """
        Initialize the transpiler.

        Args:
            config: Transpiler settings (default: TranspilerConfig())
            verbose: Enable progress messages
        """
        self.config = config or TranspilerConfig()
        self.verbose = verbose
        self._collector = ErrorCollector(max_errors=self.config.max_errors)
        self._codegen = CodeGenerator(self.config.scratch, self._collector)
        self._sentences: list[Sentence] = []
        self._output_lines: list[str] = []
        self._stats = TranspileStats()

    # =========================================================================
    # Transpilation
    # =========================================================================

    def transpile_string(self, source: str, filename: str = "<input>") -> str:
        """
        Transpile source text.

        Args:
            source: Source text, lines separated by LF or CRLF
            filename: Virtual filename for error messages

        Returns:
            The output text, lines joined with LF

        Raises:
            TooManyErrors: If the error limit is reached
        """
        self._collector.clear()
        self._sentences = [
            classify_line(line, number, filename)
            for number, line in enumerate(source.split("\n"), start=1)
        ]
        self._output_lines = []

        for sentence in self._sentences:
            if sentence.native:
                self._output_lines.append(sentence.raw_text)
                continue
            try:
                self._output_lines.extend(self._codegen.generate(sentence))
            except TranspileError as e:
                logger.debug(f"line {sentence.line_number}: {e.message}")
                self._collector.add(e)

        output = self.get_output()
        self._stats = self._compute_stats(
            filename=Path(filename).name,
            input_size=len(source.encode("utf-8")),
            output_size=len(output.encode("utf-8")),
        )

        if self.verbose:
            logger.info(
                f"{filename}: {self._stats.transpiled} sentences transpiled, "
                f"{self._stats.native} native lines"
            )
        return output

    def transpile_file(self, filepath: str | Path) -> str:
        """
        Transpile a UTF-8 source file.

        Args:
            filepath: Path to the source file

        Returns:
            The output text

        Raises:
            FileNotFoundError: If the source file does not exist
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        filepath = Path(filepath)
        logger.debug(f"Reading {filepath}")

        # Bytes are decoded directly so line terminators reach the classifier as-is
        data = filepath.read_bytes()
        output = self.transpile_string(data.decode("utf-8"), str(filepath))
        self._stats.input_size = len(data)
        return output

    def write_output(self, filepath: str | Path) -> None:
        """
        Write the last output to a file, replacing it atomically.

        The text goes to a temporary file in the target directory which is
        then renamed over the destination, so a failed write leaves any
        existing file untouched.

        Args:
            filepath: Output file path
        """
        filepath = Path(filepath)
        data = self.get_output().encode("utf-8")

        tmp = tempfile.NamedTemporaryFile(
            dir=filepath.parent,
            prefix=f".{filepath.name}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with tmp:
                tmp.write(data)
            os.replace(tmp.name, filepath)
        except OSError:
            Path(tmp.name).unlink(missing_ok=True)
            raise

        self._stats.output_name = filepath.name
        self._stats.output_size = len(data)
        logger.debug(f"Wrote {len(data)} bytes to {filepath}")

    def _compute_stats(self, filename: str, input_size: int, output_size: int) -> TranspileStats:
        sentences = self._sentences
        instructions_in = sum(
            1 for s in sentences
            if s.kind not in (SentenceKind.BLANK, SentenceKind.COMMENT)
        )
        native = sum(1 for s in sentences if s.kind is SentenceKind.NATIVE)
        instructions_out = len(self._output_lines) - (len(sentences) - instructions_in)

        return TranspileStats(
            input_name=filename,
            sentences=len(sentences),
            instructions_in=instructions_in,
            instructions_out=instructions_out,
            transpiled=sum(1 for s in sentences if not s.native),
            transpiled_out=instructions_out - native,
            native=native,
            input_size=input_size,
            output_size=output_size,
        )

    # =========================================================================
    # Results
    # =========================================================================

    def get_output(self) -> str:
        """Return the output text of the last run."""
        return "\n".join(self._output_lines)

    def get_sentences(self) -> list[Sentence]:
        """Return the classified sentences of the last run."""
        return list(self._sentences)

    def get_statistics(self) -> TranspileStats:
        """Return the statistics of the last run."""
        return self._stats

    def has_errors(self) -> bool:
        """Check if the last run collected any errors."""
        return self._collector.has_errors()

    def get_errors(self) -> list[TranspileError]:
        """Return the errors collected by the last run."""
        return list(self._collector.errors)

    def get_warnings(self) -> list[str]:
        """Return the warnings collected by the last run."""
        return list(self._collector.warnings)

    def get_error_report(self) -> str:
        """
        Get formatted error report.

        Returns:
            Error report string
        """
        return self._collector.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def transpile(source: str, filename: str = "<input>",
              config: Optional[TranspilerConfig] = None) -> str:
    """
    Convenience function to transpile source text.

    Args:
        source: Source text
        filename: Virtual filename for errors
        config: Transpiler settings

    Returns:
        The output text

    Raises:
        TranspileError: The first error, if any sentence could not be expanded
    """
    tp = Transpiler(config)
    output = tp.transpile_string(source, filename)
    if tp.has_errors():
        raise tp.get_errors()[0]
    return output


def transpile_file(input_path: str | Path, output_path: str | Path,
                   config: Optional[TranspilerConfig] = None) -> TranspileStats:
    """
    Convenience function to transpile one file into another.

    Nothing is written if any sentence could not be expanded.

    Returns:
        Statistics of the run

    Raises:
        TranspileError: The first error, if any sentence could not be expanded
        OSError: If the input cannot be read or the output cannot be written
    """
    tp = Transpiler(config)
    tp.transpile_file(input_path)
    if tp.has_errors():
        raise tp.get_errors()[0]
    tp.write_output(output_path)
    return tp.get_statistics()
