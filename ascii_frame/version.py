#!/usr/bin/env python3
# ascii_frame/version.py
"""
Version and build metadata for ascii_frame.
"""

__version__ = "0.3.0"
__build__ = "2026-10-19"
__license__ = "MIT"

def version_info() -> str:
    """Return human-readable version string."""
    return f"ascii_frame v{__version__} (build {__build__})"
