"""
impc Command-Line Interface
===========================

- **impc**: compile an imp source file, or step through its tokens

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["impc"]
