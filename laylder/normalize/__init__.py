"""Breakpoint normalizer: cascade per-breakpoint data upward."""

from .lib import normalize_schema

__all__ = ["normalize_schema"]
