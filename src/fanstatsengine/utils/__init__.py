"""Utilities for math."""

from fanstatsengine.utils.math import normalize_percentages, safe_div

__all__ = ["safe_div", "normalize_percentages"]
