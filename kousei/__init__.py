"""kousei: lint rule engine for Japanese prose."""

from __future__ import annotations

__version__ = "0.1.0"
