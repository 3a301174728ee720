"""
ACE TAP Converter Command-Line Interface
========================================

This package provides the command-line tools:

- **acetap2tzx**: Convert a TAP file to TZX
- **acetzxls**: List the blocks of a converted TZX file

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["acetap2tzx", "acetzxls"]
