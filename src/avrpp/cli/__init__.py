"""
avrpp Command-Line Interface
============================

This package provides the ``avrpp`` command, a Click-based front end to
avrpp.Transpiler with help text, a statistics report and consistent exit
codes.
"""

__all__ = ["avrpp"]
