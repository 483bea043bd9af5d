"""
Tests for ghscore.core.pipeline.tracker: candidate creation, stage moves,
history, outcome rules and technical score bands.
"""

from datetime import datetime

import pytest

from ghscore.core.errors import NotFoundError, ValidationError
from ghscore.core.notifications.fanout import get_notification_fanout
from ghscore.core.pipeline.tracker import (
    classify_technical_score,
    get_pipeline_tracker,
    validate_stage_transition,
)
from ghscore.utils.constants import CandidateStage, TechnicalScoreLevel

DAY_1 = datetime(2024, 1, 2, 9, 0, 0)
DAY_3 = datetime(2024, 1, 4, 9, 0, 0)
DAY_6 = datetime(2024, 1, 7, 9, 0, 0)


@pytest.fixture
def tracker():
    return get_pipeline_tracker()


@pytest.fixture
def candidate(make_candidate):
    return make_candidate(now=DAY_1)


# ── classify_technical_score ─────────────────────────────────────────────────


class TestClassifyTechnicalScore:
    @pytest.mark.parametrize("score,expected", [
        (5.0, TechnicalScoreLevel.STRONG),
        (4.2, TechnicalScoreLevel.STRONG),
        (4.0, TechnicalScoreLevel.STRONG),
        (3.9, TechnicalScoreLevel.ADEQUATE),
        (3.0, TechnicalScoreLevel.ADEQUATE),
        (2.5, TechnicalScoreLevel.WEAK),
        (0.0, TechnicalScoreLevel.WEAK),
    ])
    def test_bands(self, score, expected):
        assert classify_technical_score(score) == expected


# ── validate_stage_transition ────────────────────────────────────────────────


class TestValidateStageTransition:
    def test_forward_with_skip(self):
        validate_stage_transition(CandidateStage.APPLICATION, CandidateStage.TECHNICAL_INTERVIEW)

    def test_same_stage(self):
        validate_stage_transition(CandidateStage.OFFER, CandidateStage.OFFER)

    def test_discard_from_any_open_stage(self):
        for stage in (CandidateStage.APPLICATION, CandidateStage.OFFER):
            validate_stage_transition(stage, CandidateStage.DISCARDED)

    def test_backward_rejected(self):
        with pytest.raises(ValidationError):
            validate_stage_transition(CandidateStage.FINAL_INTERVIEW, CandidateStage.HR_INTERVIEW)

    @pytest.mark.parametrize("terminal", [CandidateStage.HIRED, CandidateStage.DISCARDED])
    def test_terminal_stages_are_final(self, terminal):
        with pytest.raises(ValidationError):
            validate_stage_transition(terminal, CandidateStage.OFFER)


# ── create_candidate ─────────────────────────────────────────────────────────


class TestCreateCandidate:
    def test_starts_at_application(self, candidate):
        assert candidate.stage == CandidateStage.APPLICATION
        assert candidate.interview_status == "pending"
        assert candidate.applied_at == DAY_1
        assert len(candidate.stage_history) == 1
        assert candidate.stage_history[0].stage == CandidateStage.APPLICATION
        assert candidate.stage_history[0].ended_at is None

    def test_unknown_vacancy(self, make_candidate):
        with pytest.raises(NotFoundError):
            make_candidate(vacancy_id="64b000000000000000000000")

    def test_invalid_email(self, make_candidate):
        with pytest.raises(ValidationError) as exc:
            make_candidate(email="not-an-email")
        assert exc.value.details[0]["field"] == "email"

    def test_blank_name(self, make_candidate):
        with pytest.raises(ValidationError):
            make_candidate(name="  ")

    def test_listed_by_vacancy(self, tracker, tenant_id, vacancy, make_candidate):
        make_candidate(name="Ana")
        make_candidate(name="Luis", email="luis@example.com")
        listed = tracker.list_candidates(tenant_id, vacancy_id=str(vacancy.id))
        assert sorted(c.name for c in listed) == ["Ana", "Luis"]


# ── update_candidate: stages ─────────────────────────────────────────────────


class TestStageMoves:
    def test_forward_move_records_history(self, tracker, tenant_id, candidate):
        updated = tracker.update_candidate(
            tenant_id, str(candidate.id), {"stage": "hr_interview"}, now=DAY_3
        )
        assert updated.stage == CandidateStage.HR_INTERVIEW
        first, second = updated.stage_history
        assert first.ended_at == DAY_3
        assert first.days_spent == 2.0
        assert second.stage == CandidateStage.HR_INTERVIEW
        assert second.ended_at is None

    def test_backward_move_rejected(self, tracker, tenant_id, candidate):
        tracker.update_candidate(tenant_id, str(candidate.id), {"stage": "technical_test"}, now=DAY_3)
        with pytest.raises(ValidationError):
            tracker.update_candidate(tenant_id, str(candidate.id), {"stage": "hr_interview"}, now=DAY_6)

    def test_hiring_stamps_date_and_notifies(self, tracker, tenant_id, candidate):
        hired = tracker.update_candidate(tenant_id, str(candidate.id), {"stage": "hired"}, now=DAY_6)
        assert hired.hired_at == DAY_6

        feed = get_notification_fanout().list_notifications(tenant_id)
        assert [n.type for n in feed] == ["candidate_hired"]
        assert feed[0].payload["candidate_id"] == str(candidate.id)

    def test_no_moves_after_discard(self, tracker, tenant_id, candidate):
        tracker.update_candidate(tenant_id, str(candidate.id), {"stage": "discarded"}, now=DAY_3)
        with pytest.raises(ValidationError):
            tracker.update_candidate(tenant_id, str(candidate.id), {"stage": "offer"}, now=DAY_6)

    def test_unknown_stage_rejected(self, tracker, tenant_id, candidate):
        with pytest.raises(ValidationError):
            tracker.update_candidate(tenant_id, str(candidate.id), {"stage": "onboarding"})

    def test_unknown_candidate(self, tracker, tenant_id):
        with pytest.raises(NotFoundError):
            tracker.update_candidate(tenant_id, "64b000000000000000000000", {"stage": "offer"})


# ── update_candidate: scores and outcome ─────────────────────────────────────


class TestScoresAndOutcome:
    def test_technical_score_rescore_keeps_stage(self, tracker, tenant_id, candidate):
        tracker.update_candidate(tenant_id, str(candidate.id), {"stage": "technical_test"}, now=DAY_3)

        strong = tracker.update_candidate(tenant_id, str(candidate.id), {"technical_score": 4.2})
        assert classify_technical_score(strong.technical_score) == TechnicalScoreLevel.STRONG

        weak = tracker.update_candidate(tenant_id, str(candidate.id), {"technical_score": 2.5})
        assert classify_technical_score(weak.technical_score) == TechnicalScoreLevel.WEAK
        assert weak.stage == CandidateStage.TECHNICAL_TEST

    def test_technical_score_clamped(self, tracker, tenant_id, candidate):
        updated = tracker.update_candidate(tenant_id, str(candidate.id), {"technical_score": 7})
        assert updated.technical_score == 5.0

    def test_not_fit_requires_reason(self, tracker, tenant_id, candidate):
        with pytest.raises(ValidationError) as exc:
            tracker.update_candidate(tenant_id, str(candidate.id), {"result": "not_fit"})
        assert exc.value.details[0]["field"] == "not_fit_reason"

    def test_not_fit_blank_reason_rejected(self, tracker, tenant_id, candidate):
        with pytest.raises(ValidationError):
            tracker.update_candidate(
                tenant_id, str(candidate.id), {"result": "not_fit", "not_fit_reason": "   "}
            )

    def test_not_fit_with_reason(self, tracker, tenant_id, candidate):
        updated = tracker.update_candidate(
            tenant_id,
            str(candidate.id),
            {"result": "not_fit", "not_fit_reason": "Sin experiencia en obra"},
        )
        assert updated.result == "not_fit"
        assert updated.not_fit_reason == "Sin experiencia en obra"

    def test_retention_only_for_hired(self, tracker, tenant_id, candidate):
        with pytest.raises(ValidationError):
            tracker.update_candidate(tenant_id, str(candidate.id), {"retention_90d": "continuing"})

    def test_retention_for_hired(self, tracker, tenant_id, candidate):
        tracker.update_candidate(tenant_id, str(candidate.id), {"stage": "hired"}, now=DAY_6)
        updated = tracker.update_candidate(
            tenant_id, str(candidate.id), {"retention_90d": "voluntary_exit"}
        )
        assert updated.retention_90d == "voluntary_exit"

    def test_unknown_field_rejected(self, tracker, tenant_id, candidate):
        with pytest.raises(ValidationError):
            tracker.update_candidate(tenant_id, str(candidate.id), {"vacancy_id": "elsewhere"})
