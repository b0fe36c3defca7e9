"""Schema-less REST API over an in-memory JSON snapshot."""

from __future__ import annotations

__version__ = "1.0.0"
