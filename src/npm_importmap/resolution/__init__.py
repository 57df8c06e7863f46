"""Entry-point resolution for npm packages."""

from __future__ import annotations

from .conditions import allowed_conditions, match_target, resolve_exports
from .exports import resolve_definition
from .fallback import resolve_fallback, strip_relative

__all__ = [
    "allowed_conditions",
    "match_target",
    "resolve_definition",
    "resolve_exports",
    "resolve_fallback",
    "strip_relative",
]
