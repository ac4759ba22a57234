# =============================================================================
# test_cli.py - avrpp Command-Line Tests
# =============================================================================
# Runs the click command in an isolated filesystem.
# =============================================================================

from pathlib import Path

from click.testing import CliRunner
from avrpp.cli.avrpp import main


SOURCE = "; demo\n    $ r1 + r2 -> r3\n    nop\n"


class TestAvrppCommand:
    """Integration tests for the avrpp command."""

    def test_transpile(self):
        """-i/-o transpiles and prints the report."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("main.pasm").write_text(SOURCE)

            result = runner.invoke(main, ["-i", "main.pasm", "-o", "main.asm"])

            assert result.exit_code == 0, f"Run failed: {result.output}"
            output = Path("main.asm").read_text()
            assert "    add r24, r25" in output
            assert output.startswith("; demo\n")
            assert "Instructions" in result.output
            assert "main.pasm" in result.output

    def test_long_options_any_order(self):
        """--out may come before --in."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("main.pasm").write_text(SOURCE)

            result = runner.invoke(main, ["--out", "main.asm", "--in", "main.pasm"])

            assert result.exit_code == 0
            assert Path("main.asm").exists()

    def test_quiet(self):
        """-q suppresses the report."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("main.pasm").write_text(SOURCE)

            result = runner.invoke(main, ["-q", "-i", "main.pasm", "-o", "main.asm"])

            assert result.exit_code == 0
            assert "Instructions" not in result.output

    def test_pointer_option(self):
        """-p selects the pointer pair used for mem[...] operands."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("main.pasm").write_text("$ mem[0x20] -> r1\n")

            result = runner.invoke(main, ["-i", "main.pasm", "-o", "main.asm", "-p", "z", "-q"])

            assert result.exit_code == 0
            assert "ld r1, Z" in Path("main.asm").read_text()

    def test_warning_printed_once(self):
        """Scratch aliasing warnings appear once and the file is still written."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("main.pasm").write_text("$ r1 + r2 -> r24\n")

            result = runner.invoke(main, ["-q", "-i", "main.pasm", "-o", "main.asm"])

            assert result.exit_code == 0
            assert result.output.count("is overwritten") == 1
            assert Path("main.asm").exists()

    def test_long_branch_target(self):
        """Long goto labels are written through."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("main.pasm").write_text("$ if r1 == r2 goto main_loop_finished\n")

            result = runner.invoke(main, ["-q", "-i", "main.pasm", "-o", "main.asm"])

            assert result.exit_code == 0
            assert "breq main_loop_finished" in Path("main.asm").read_text()

    def test_help(self):
        """-h prints usage and does nothing else."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["-h"])

            assert result.exit_code == 0
            assert "Usage:" in result.output
            assert "--in" in result.output
            assert list(Path(".").iterdir()) == []

    def test_no_arguments_prints_usage(self):
        """Running without arguments shows usage."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, [])

            assert "Usage:" in result.output
            assert list(Path(".").iterdir()) == []

    def test_invalid_option(self):
        """Unknown options are usage errors and touch no files."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["-x", "main.pasm", "-o", "main.asm"])

            assert result.exit_code == 2
            assert not Path("main.asm").exists()

    def test_missing_output_option(self):
        """Both --in and --out are required."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("main.pasm").write_text(SOURCE)

            result = runner.invoke(main, ["-i", "main.pasm"])

            assert result.exit_code == 2

    def test_missing_input_file(self):
        """A missing input is rejected before anything is written."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["-i", "absent.pasm", "-o", "main.asm"])

            assert result.exit_code == 2
            assert not Path("main.asm").exists()

    def test_transpile_error(self):
        """Unsupported sentences are reported and no output is written."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("bad.pasm").write_text("nop\n$ r1 / r2 -> r3\n")

            result = runner.invoke(main, ["-i", "bad.pasm", "-o", "bad.asm"])

            assert result.exit_code == 1
            assert "bad.pasm:2:1: error:" in result.output
            assert not Path("bad.asm").exists()

    def test_invalid_utf8(self):
        """Non-UTF-8 input is a fatal argument error."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("latin.pasm").write_bytes(b"; caf\xe9\n")

            result = runner.invoke(main, ["-i", "latin.pasm", "-o", "out.asm"])

            assert result.exit_code == 2
            assert not Path("out.asm").exists()

    def test_version(self):
        """--version prints the program version."""
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "avrpp" in result.output
