"""
Applicant-vacancy matching engine.

Computes the 0-100 match score stored with every application. Scoring is
delegated to a pluggable provider; when the provider is missing or fails
the engine degrades to the configured default score so that an
application is never blocked by scoring.
"""

import math
import re
import secrets
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from ghscore.core.errors import UpstreamDegraded
from ghscore.data.models.vacancy import Vacancy
from ghscore.utils.config import ScoringSettings, get_settings
from ghscore.utils.constants import (
    EDUCATION_LEVELS,
    MATCH_SCORE_MAX,
    MATCH_SCORE_MIN,
    AuditAction,
)
from ghscore.utils.logger import audit_log, get_logger

logger = get_logger(__name__)

# Skills looked for in the vacancy text when the vacancy lists none
COMMON_SKILLS = (
    "javascript", "typescript", "react", "angular", "vue", "node.js", "python",
    "java", "sql", "aws", "docker", "kubernetes", "git", "agile", "scrum",
    "mongodb", "postgresql", "redis", "graphql", "excel", "sap", "power bi",
    "autocad", "contabilidad", "ventas", "logistica", "logística",
)

# Related skill groups; a related skill counts as half a match
RELATED_SKILL_GROUPS = (
    {"python", "django", "flask", "fastapi"},
    {"javascript", "typescript", "node.js", "react", "angular", "vue"},
    {"java", "spring", "hibernate", "kotlin"},
    {"sql", "mysql", "postgresql", "oracle", "mongodb"},
    {"aws", "gcp", "azure", "cloud"},
    {"docker", "kubernetes", "containerization"},
)

DEFAULT_REQUIRED_YEARS = 3

_YEARS_PATTERN = re.compile(r"(\d+)\+?\s*(años?|anos?|years?)", re.IGNORECASE)

# Score an applicant starts from before any evidence is counted
BASE_SCORE = 50


@dataclass
class ApplicantProfile:
    """The parts of an application the scorer looks at."""

    skills: list[str] = field(default_factory=list)
    years_experience: float = 0.0
    education_level: Optional[str] = None
    current_title: Optional[str] = None
    city: Optional[str] = None

    @classmethod
    def from_submission(cls, submission: Any) -> "ApplicantProfile":
        return cls(
            skills=list(getattr(submission, "skills", None) or []),
            years_experience=float(getattr(submission, "years_experience", 0) or 0),
            education_level=getattr(submission, "education_level", None),
            current_title=getattr(submission, "current_title", None),
            city=getattr(submission, "city", None),
        )


@dataclass
class ScoreResult:
    """Outcome of scoring one application."""

    match_score: int
    degraded: bool = False
    recommendation: Optional[str] = None
    matched_skills: list[str] = field(default_factory=list)


class ScoringProvider(Protocol):
    """Anything that can score an applicant against a vacancy."""

    name: str

    def score(self, profile: ApplicantProfile, vacancy: Vacancy) -> ScoreResult:
        ...


def clamp_score(value: Any, default: int) -> int:
    """Coerce a raw provider score to an integer in [0, 100]."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return int(max(MATCH_SCORE_MIN, min(MATCH_SCORE_MAX, round(number))))


def recommendation_for(score: int) -> str:
    if score >= 75:
        return "Recommended"
    elif score >= 60:
        return "Consider"
    return "Not Recommended"


def issue_tracking_token() -> str:
    """Return a fresh unguessable tracking token (32 random bytes, hex)."""
    return secrets.token_hex(32)


class HeuristicScoringProvider:
    """
    Offline scorer based on skills, experience and education.

    Starts from a base of 50 and distributes the remaining 50 points over
    the three factors according to the configured weights.
    """

    name = "heuristic"

    def __init__(self, settings: Optional[ScoringSettings] = None):
        settings = settings or get_settings().scoring
        self.weights = {
            "skills": settings.skills_weight,
            "experience": settings.experience_weight,
            "education": settings.education_weight,
        }

    def score(self, profile: ApplicantProfile, vacancy: Vacancy) -> ScoreResult:
        text = self._vacancy_text(vacancy)

        matched, skills_score = self._match_skills(profile.skills, text)
        experience_score = self._match_experience(profile.years_experience, text)
        education_score = self._match_education(profile.education_level)

        total_weight = sum(self.weights.values()) or 1.0
        weighted = (
            self.weights["skills"] * skills_score
            + self.weights["experience"] * experience_score
            + self.weights["education"] * education_score
        ) / total_weight

        score = clamp_score(BASE_SCORE + (MATCH_SCORE_MAX - BASE_SCORE) * weighted, 0)
        return ScoreResult(
            match_score=score,
            recommendation=recommendation_for(score),
            matched_skills=matched,
        )

    @staticmethod
    def _vacancy_text(vacancy: Vacancy) -> str:
        return " ".join(filter(None, [vacancy.title, vacancy.notes])).lower()

    def _match_skills(self, skills: list[str], text: str) -> tuple[list[str], float]:
        """Match applicant skills against the skills named in the vacancy text."""
        required = [s for s in COMMON_SKILLS if s in text]
        candidate_skills = {s.strip().lower() for s in skills if s and s.strip()}

        if not required:
            # Nothing to compare against; any declared skill is weak evidence
            return [], 0.5 if candidate_skills else 0.0

        matched: list[str] = []
        points = 0.0
        for skill in required:
            if any(skill in cs or cs in skill for cs in candidate_skills):
                matched.append(skill)
                points += 1
            elif self._find_related_skill(skill, candidate_skills):
                points += 0.5

        # Three matched skills saturate the factor
        return matched, min(points / min(len(required), 3), 1.0)

    @staticmethod
    def _find_related_skill(target: str, candidate_skills: set[str]) -> Optional[str]:
        for group in RELATED_SKILL_GROUPS:
            if target in group:
                for skill in candidate_skills:
                    if skill in group and skill != target:
                        return skill
        return None

    @staticmethod
    def _match_experience(years: float, text: str) -> float:
        match = _YEARS_PATTERN.search(text)
        required = int(match.group(1)) if match else DEFAULT_REQUIRED_YEARS

        if required == 0 or years >= required:
            return 1.0
        elif years >= required * 0.7:
            return 0.67
        elif years > 0:
            return 0.5 * (years / required)
        return 0.0

    @staticmethod
    def _match_education(level: Optional[str]) -> float:
        if not level:
            return 0.0
        rank = EDUCATION_LEVELS.get(level.strip().lower(), 0)
        # Professional degree (rank 4) or above earns the full factor
        return min(rank / 4, 1.0)


class MatchingEngine:
    """
    Scores applications exactly once, at submission.

    Any provider failure is reported as UpstreamDegraded in the log and
    replaced by the default score; the caller always receives a result.
    """

    def __init__(
        self,
        provider: Optional[ScoringProvider] = None,
        default_score: Optional[int] = None,
    ):
        settings = get_settings().scoring
        self.provider = provider
        self.default_score = (
            settings.default_score if default_score is None else default_score
        )

    def score_application(self, profile: ApplicantProfile, vacancy: Vacancy) -> ScoreResult:
        """Score an applicant against a vacancy; never raises for provider errors."""
        try:
            if self.provider is None:
                raise UpstreamDegraded("No scoring provider configured")
            result = self.provider.score(profile, vacancy)
            result.match_score = clamp_score(result.match_score, self.default_score)
        except Exception as e:
            degraded = e if isinstance(e, UpstreamDegraded) else UpstreamDegraded(str(e))
            logger.warning(f"Scoring degraded to default {self.default_score}: {degraded.message}")
            result = ScoreResult(match_score=self.default_score, degraded=True)

        audit_log(
            AuditAction.APPLICATION_SCORED.value,
            {
                "vacancy_id": str(vacancy.id),
                "provider": getattr(self.provider, "name", None),
                "match_score": result.match_score,
                "degraded": result.degraded,
            },
        )
        return result


def build_provider(settings: Optional[ScoringSettings] = None) -> Optional[ScoringProvider]:
    """Create the provider selected in settings."""
    settings = settings or get_settings().scoring
    if settings.provider == "heuristic":
        return HeuristicScoringProvider(settings)
    return None


# Singleton instance
_matching_engine: Optional[MatchingEngine] = None


def get_matching_engine() -> MatchingEngine:
    """Get the matching engine singleton instance."""
    global _matching_engine
    if _matching_engine is None:
        _matching_engine = MatchingEngine(provider=build_provider())
    return _matching_engine
