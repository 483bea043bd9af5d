"""
Applicant-vacancy matching and tracking-token issuance.
"""

from .matching_engine import (
    ApplicantProfile,
    HeuristicScoringProvider,
    MatchingEngine,
    ScoreResult,
    ScoringProvider,
    build_provider,
    clamp_score,
    get_matching_engine,
    issue_tracking_token,
)

__all__ = [
    "ApplicantProfile",
    "HeuristicScoringProvider",
    "MatchingEngine",
    "ScoreResult",
    "ScoringProvider",
    "build_provider",
    "clamp_score",
    "get_matching_engine",
    "issue_tracking_token",
]
