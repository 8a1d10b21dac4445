"""
Hack SDK Command-Line Interface
===============================

- **hackasm**: Hack assembler

Implemented as a Click-based CLI application with unified error
reporting and exit codes.
"""

__all__ = ["hackasm"]
