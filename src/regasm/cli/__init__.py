"""
regasm Command-Line Interface
=============================

This package provides the command-line tool for regasm:

- **rasm**: scan and resolve a source file, print the annotated tokens

The tool is a Click-based CLI application with help text and error
reporting shared through cli.errors.
"""

__all__ = ["rasm"]
