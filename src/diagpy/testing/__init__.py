from __future__ import annotations

from .corpus import generate_diagnostics

__all__ = ["generate_diagnostics"]
