"""
Transpilation Report
====================

Renders TranspileStats as the fixed-width table printed after a run:

                    ┌──────────┬──────────┐
                    │ main.pasm│ main.asm │
    ┌───────────────┼──────────┼──────────┤
    │ Instructions  │ ...      │ ...      │
    │ (Transpiled)  │ ...      │ ...      │
    │ (Native)      │ ...      │ ...      │
    ├───────────────┼──────────┼──────────┤
    │ File Size (b) │ ...      │ ...      │
    │ (Kb)          │ ...      │ ...      │
    └───────────────┴──────────┴──────────┘

Every value cell is padded to the widest value in the table. The report
is for people only; nothing reads it back.
"""

from typing import Optional

from avrpp.transpiler import TranspileStats


# Row label column, including its one-space margins
_LABEL_WIDTH = 15


def _cells(stats: TranspileStats) -> list[Optional[tuple[str, str, str]]]:
    """Table rows as (label, input cell, output cell); None marks a rule."""
    return [
        ("Instructions", str(stats.instructions_in), str(stats.instructions_out)),
        ("(Transpiled)", f"({stats.transpiled})", f"({stats.transpiled_out})"),
        ("(Native)", f"({stats.native})", f"({stats.native})"),
        None,
        ("File Size (b)", str(stats.input_size), str(stats.output_size)),
        ("(Kb)", f"{stats.input_size_kb:.2f}", f"{stats.output_size_kb:.2f}"),
    ]


def format_report(stats: TranspileStats) -> str:
    """
    Format run statistics as a box-drawn table.

    Args:
        stats: Statistics from Transpiler.get_statistics()

    Returns:
        The table, one line per row, without a trailing newline
    """
    rows = _cells(stats)
    values = [stats.input_name, stats.output_name]
    for row in rows:
        if row is not None:
            values.extend(row[1:])
    width = max(len(value) for value in values)

    def cell(value: str) -> str:
        return value.ljust(width)[:width]

    hline = "─" * width
    label_rule = "─" * _LABEL_WIDTH
    margin = " " * (_LABEL_WIDTH + 1)

    lines = [
        f"{margin}┌─{hline}─┬─{hline}─┐",
        f"{margin}│ {cell(stats.input_name)} │ {cell(stats.output_name)} │",
        f"┌{label_rule}┼─{hline}─┼─{hline}─┤",
    ]
    for row in rows:
        if row is None:
            lines.append(f"├{label_rule}┼─{hline}─┼─{hline}─┤")
            continue
        label, left, right = row
        lines.append(f"│ {label.ljust(_LABEL_WIDTH - 2)} │ {cell(left)} │ {cell(right)} │")
    lines.append(f"└{label_rule}┴─{hline}─┴─{hline}─┘")

    return "\n".join(lines)
