"""
arithc Command-Line Interface
=============================

This package provides the `arithc` command, a Click-based front end to
the expression compiler, and the shared exit-code handling it uses.
"""

__all__ = ["arithc", "errors"]
