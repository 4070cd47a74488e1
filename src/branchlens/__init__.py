"""
Branch Lens - chart-ready diff analysis between two git references.

Compares a base branch against a compare branch (from their merge base or
tip to tip, against the committed tip or the live working tree) and folds
the diff into summary counters and datasets. Results are cached and
pollable, so dashboards can refresh against a live repository cheaply.
"""

__version__ = "0.3.0"
__author__ = "Naman Agarwal"

from .analysis import AnalysisPoller, AnalysisService
from .models import AnalysisRequest, AnalysisResult, PollResponse

__all__ = [
    "AnalysisService",  # Main entry point
    "AnalysisPoller",
    "AnalysisRequest",
    "AnalysisResult",
    "PollResponse",
]
