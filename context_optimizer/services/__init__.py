"""Service components around the packing pipeline."""

from .content_normalizer import AddOptions, normalize_content
from .cost_estimator import estimate_cost
from .reporter import build_stats, detect_warnings

__all__ = ["AddOptions", "normalize_content", "estimate_cost", "build_stats", "detect_warnings"]
