"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Package version, read from the ``VERSION`` file at the repository root.
"""

from pathlib import Path

VERSION_FILE = Path(__file__).resolve().parent.parent / "VERSION"


def read_version(path: Path = VERSION_FILE) -> str:
    try:
        return path.read_text().strip()
    except OSError:
        return "0.0.0+unknown"


__version__ = read_version()
