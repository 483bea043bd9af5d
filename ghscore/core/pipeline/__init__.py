"""
Candidate pipeline: stage progression, history and outcomes.
"""

from .tracker import (
    CandidatePipelineTracker,
    classify_technical_score,
    get_pipeline_tracker,
    validate_stage_transition,
)

__all__ = [
    "CandidatePipelineTracker",
    "classify_technical_score",
    "get_pipeline_tracker",
    "validate_stage_transition",
]
