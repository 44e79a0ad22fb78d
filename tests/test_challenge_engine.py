"""Unit tests for ChallengeEngine - discipline challenge state machine.

Test Categories:
- Creation and duration validation
- Reward and tip catalogs per duration
- Day completion and completion detection
- Lazy expiry
- Difficulty journal, rewards, tips
- Extension
"""

from __future__ import annotations

from datetime import date

import pytest

from custom_components.lifetracker import const
from custom_components.lifetracker.engines.challenge_engine import (
    ChallengeEngine,
    ChallengeValidationError,
)
from custom_components.lifetracker.type_defs import DisciplineChallengeData
from custom_components.lifetracker.utils import dt_utils

START = date(2024, 2, 1)


def make_challenge(duration: int = 7, start: date = START) -> DisciplineChallengeData:
    """Create a fresh active challenge."""
    return ChallengeEngine.create(
        "challenge-1",
        "user-1",
        "habit-1",
        duration,
        start,
        created_at="2024-02-01T08:00:00+00:00",
    )


def complete_days(challenge: DisciplineChallengeData, days: int) -> DisciplineChallengeData:
    """Complete the first N days of the challenge."""
    for offset in range(days):
        challenge = ChallengeEngine.mark_day_complete(
            challenge, dt_utils.dt_add_days(START, offset), now_iso="2024-02-07T20:00:00"
        )
    return challenge


class TestCreate:
    """Challenge creation."""

    def test_initial_state(self) -> None:
        """A new 7-day challenge spans 2024-02-01..07 and starts active."""
        challenge = make_challenge()
        assert challenge["status"] == const.CHALLENGE_STATUS_ACTIVE
        assert challenge["start_date"] == "2024-02-01"
        assert challenge["end_date"] == "2024-02-07"
        assert challenge["completed_days"] == []
        assert challenge["difficulty_map"] == {}
        assert challenge["completed_at"] is None

    @pytest.mark.parametrize("duration", [0, 5, 10, 30])
    def test_invalid_duration_rejected(self, duration: int) -> None:
        """Only 7, 14 and 21 days may be started."""
        with pytest.raises(ChallengeValidationError):
            make_challenge(duration)

    def test_ensure_no_active(self) -> None:
        """A second active challenge for the same habit is rejected."""
        existing = make_challenge()
        with pytest.raises(ChallengeValidationError):
            ChallengeEngine.ensure_no_active([existing], "habit-1")
        # Other habits are unaffected
        ChallengeEngine.ensure_no_active([existing], "habit-2")

    def test_ensure_no_active_ignores_terminal(self) -> None:
        """Failed or completed challenges do not block a new one."""
        failed = ChallengeEngine.evaluate_expiry(make_challenge(), date(2024, 2, 8))
        ChallengeEngine.ensure_no_active([failed], "habit-1")


class TestCatalogs:
    """Reward and tip generation."""

    def test_seven_day_rewards(self) -> None:
        """7 days: rewards on day 3 and day 7."""
        rewards = ChallengeEngine.build_rewards(7)
        assert [(r["day"], r["xp"]) for r in rewards] == [(3, 50), (7, 150)]
        assert all(r["unlocked"] is False for r in rewards)

    def test_twenty_one_day_rewards(self) -> None:
        """21 days: four milestones ending at 500 XP."""
        rewards = ChallengeEngine.build_rewards(21)
        assert [(r["day"], r["xp"]) for r in rewards] == [
            (3, 50),
            (7, 100),
            (14, 200),
            (21, 500),
        ]

    def test_long_duration_adds_weekly_bonus(self) -> None:
        """Beyond 21 days a bonus reward appears every 7 days."""
        rewards = ChallengeEngine.build_rewards(35)
        extra = [r for r in rewards if r["id"].startswith("r-extra-")]
        assert [(r["id"], r["xp"]) for r in extra] == [
            ("r-extra-28", 400),
            ("r-extra-35", 500),
        ]

    def test_tips_bounded_by_duration(self) -> None:
        """Tips are generated only for offsets inside the duration."""
        assert [tip["day"] for tip in ChallengeEngine.build_tips(7)] == list(
            range(1, 8)
        )
        assert max(tip["day"] for tip in ChallengeEngine.build_tips(14)) == 14
        assert len(ChallengeEngine.build_tips(21)) == len(const.CHALLENGE_TIP_CATALOG)


class TestDayCompletion:
    """Day marking and completion detection."""

    def test_all_days_completes_challenge(self) -> None:
        """Marking every day of the range completes the challenge."""
        challenge = complete_days(make_challenge(), 7)
        assert challenge["status"] == const.CHALLENGE_STATUS_COMPLETED
        assert challenge["completed_at"] == "2024-02-07T20:00:00"
        assert len(challenge["completed_days"]) == 7

    def test_completion_independent_of_marking_order(self) -> None:
        """Days marked out of order still complete the challenge."""
        challenge = make_challenge()
        for offset in [6, 0, 3, 1, 5, 2, 4]:
            challenge = ChallengeEngine.mark_day_complete(
                challenge, dt_utils.dt_add_days(START, offset)
            )
        assert challenge["status"] == const.CHALLENGE_STATUS_COMPLETED
        assert challenge["completed_days"][0] == "2024-02-01"
        assert challenge["completed_days"][-1] == "2024-02-07"

    def test_unknown_status_not_changed(self) -> None:
        """A status outside the transition table accepts no day."""
        challenge = make_challenge()
        challenge["status"] = "paused"  # type: ignore[typeddict-item]
        after = ChallengeEngine.mark_day_complete(challenge, START)
        assert after["status"] == "paused"
        assert after["completed_days"] == []

    def test_partial_stays_active(self) -> None:
        """Six of seven days leaves the challenge active."""
        challenge = complete_days(make_challenge(), 6)
        assert challenge["status"] == const.CHALLENGE_STATUS_ACTIVE

    def test_out_of_range_day_ignored(self) -> None:
        """Days outside the range do not count."""
        challenge = ChallengeEngine.mark_day_complete(make_challenge(), date(2024, 2, 9))
        assert challenge["completed_days"] == []

    def test_duplicate_day_ignored(self) -> None:
        """Completing the same day twice stores it once."""
        challenge = make_challenge()
        challenge = ChallengeEngine.mark_day_complete(challenge, START)
        challenge = ChallengeEngine.mark_day_complete(challenge, START)
        assert challenge["completed_days"] == ["2024-02-01"]

    def test_terminal_challenge_not_changed(self) -> None:
        """A failed challenge ignores further completions."""
        failed = ChallengeEngine.evaluate_expiry(make_challenge(), date(2024, 2, 8))
        after = ChallengeEngine.mark_day_complete(failed, START)
        assert after["completed_days"] == []

    def test_input_not_mutated(self) -> None:
        """mark_day_complete returns a copy."""
        challenge = make_challenge()
        ChallengeEngine.mark_day_complete(challenge, START)
        assert challenge["completed_days"] == []


class TestExpiry:
    """Lazy expiry evaluation."""

    def test_partial_fails_after_end(self) -> None:
        """Six of seven days evaluated on 2024-02-08 fails."""
        challenge = complete_days(make_challenge(), 6)
        expired = ChallengeEngine.evaluate_expiry(challenge, date(2024, 2, 8))
        assert expired["status"] == const.CHALLENGE_STATUS_FAILED

    def test_not_expired_on_end_date(self) -> None:
        """The last day itself is still in play."""
        challenge = complete_days(make_challenge(), 6)
        assert (
            ChallengeEngine.evaluate_expiry(challenge, date(2024, 2, 7))["status"]
            == const.CHALLENGE_STATUS_ACTIVE
        )

    def test_terminal_unchanged(self) -> None:
        """Completed challenges are never failed later."""
        challenge = complete_days(make_challenge(), 7)
        assert (
            ChallengeEngine.evaluate_expiry(challenge, date(2024, 3, 1))["status"]
            == const.CHALLENGE_STATUS_COMPLETED
        )

    def test_covered_range_completes_on_expiry(self) -> None:
        """Stored data covering every day completes late and gets completed_at."""
        challenge = make_challenge()
        challenge["completed_days"] = [
            day.isoformat() for day in dt_utils.dt_days_in_range(START, date(2024, 2, 7))
        ]
        settled = ChallengeEngine.evaluate_expiry(
            challenge, date(2024, 2, 8), now_iso="2024-02-08T00:05:00"
        )
        assert settled["status"] == const.CHALLENGE_STATUS_COMPLETED
        assert settled["completed_at"] == "2024-02-08T00:05:00"

    def test_failed_expiry_leaves_completed_at_empty(self) -> None:
        """A failed challenge has no completion timestamp."""
        settled = ChallengeEngine.evaluate_expiry(
            complete_days(make_challenge(), 2), date(2024, 2, 8)
        )
        assert settled["status"] == const.CHALLENGE_STATUS_FAILED
        assert settled["completed_at"] is None

    def test_transitions(self) -> None:
        """Terminal states allow no transitions."""
        assert ChallengeEngine.can_transition(
            const.CHALLENGE_STATUS_ACTIVE, const.CHALLENGE_STATUS_FAILED
        )
        assert not ChallengeEngine.can_transition(
            const.CHALLENGE_STATUS_FAILED, const.CHALLENGE_STATUS_ACTIVE
        )
        assert not ChallengeEngine.can_transition(
            const.CHALLENGE_STATUS_COMPLETED, const.CHALLENGE_STATUS_ACTIVE
        )


class TestJournalRewardsTips:
    """Difficulty journal, rewards and tips."""

    def test_record_difficulty_upserts(self) -> None:
        """The last score for a day wins."""
        challenge = ChallengeEngine.record_difficulty(make_challenge(), START, 4)
        challenge = ChallengeEngine.record_difficulty(challenge, START, 8)
        assert challenge["difficulty_map"] == {"2024-02-01": 8}

    @pytest.mark.parametrize("score", [0, 11, True, 5.5])
    def test_record_difficulty_rejects_bad_scores(self, score: object) -> None:
        """Scores must be integers in 1..10."""
        with pytest.raises(ChallengeValidationError):
            ChallengeEngine.record_difficulty(make_challenge(), START, score)  # type: ignore[arg-type]

    def test_pending_rewards_follow_completed_count(self) -> None:
        """Rewards become pending once enough days are done."""
        challenge = complete_days(make_challenge(), 3)
        assert [r["id"] for r in ChallengeEngine.pending_rewards(challenge)] == ["r1"]

    def test_unlock_reward_once(self) -> None:
        """A reward grants its XP only on the first unlock."""
        challenge = complete_days(make_challenge(), 3)
        challenge, xp = ChallengeEngine.unlock_reward(challenge, "r1", "2024-02-03T21:00:00")
        assert xp == 50
        assert challenge["rewards"][0]["unlocked"] is True
        challenge, xp = ChallengeEngine.unlock_reward(challenge, "r1")
        assert xp == 0
        assert ChallengeEngine.pending_rewards(challenge) == []

    def test_unlock_unknown_reward(self) -> None:
        """Unknown ids grant nothing."""
        _, xp = ChallengeEngine.unlock_reward(make_challenge(), "r99")
        assert xp == 0

    def test_next_tip_tracks_upcoming_day(self) -> None:
        """The next tip is for the day about to be attempted."""
        challenge = make_challenge()
        tip = ChallengeEngine.next_tip(challenge)
        assert tip is not None
        assert tip["day"] == 1

        challenge = ChallengeEngine.mark_tip_shown(challenge, tip["id"])
        assert ChallengeEngine.next_tip(challenge) is None

        challenge = complete_days(challenge, 2)
        tip = ChallengeEngine.next_tip(challenge)
        assert tip is not None
        assert tip["day"] == 3


class TestExtend:
    """Challenge extension."""

    def test_extend_preserves_unlocked_rewards(self) -> None:
        """Extending keeps existing state and adds new offsets."""
        challenge = complete_days(make_challenge(), 3)
        challenge, _ = ChallengeEngine.unlock_reward(challenge, "r1")
        extended = ChallengeEngine.extend(challenge, 7)

        assert extended["duration"] == 14
        assert extended["end_date"] == "2024-02-14"
        by_day = {r["day"]: r for r in extended["rewards"]}
        assert by_day[3]["unlocked"] is True
        assert by_day[7]["xp"] == 150
        assert by_day[14]["xp"] == 300
        assert max(tip["day"] for tip in extended["tips"]) == 14

    def test_extend_preserves_shown_tips(self) -> None:
        """A tip already shown stays shown after the range grows."""
        challenge = ChallengeEngine.mark_tip_shown(make_challenge(), "tip-4")
        extended = ChallengeEngine.extend(challenge, 3)

        assert extended["duration"] == 10
        assert extended["end_date"] == "2024-02-10"
        shown = {tip["id"]: tip["shown"] for tip in extended["tips"]}
        assert shown["tip-4"] is True
        assert shown["tip-5"] is False
        assert shown["tip-10"] is False

    def test_extend_beyond_twenty_one(self) -> None:
        """Extending a 21-day challenge to 28 adds the weekly bonus."""
        extended = ChallengeEngine.extend(make_challenge(21), 7)
        assert any(r["id"] == "r-extra-28" for r in extended["rewards"])

    @pytest.mark.parametrize("extra", [0, -3])
    def test_extend_requires_positive_days(self, extra: int) -> None:
        """Zero or negative extensions are rejected."""
        with pytest.raises(ChallengeValidationError):
            ChallengeEngine.extend(make_challenge(), extra)

    def test_extend_terminal_rejected(self) -> None:
        """Only active challenges may be extended."""
        with pytest.raises(ChallengeValidationError):
            ChallengeEngine.extend(complete_days(make_challenge(), 7), 7)

    def test_extend_max_duration(self) -> None:
        """Total duration is capped at 365 days."""
        with pytest.raises(ChallengeValidationError):
            ChallengeEngine.extend(make_challenge(21), 345)


class TestProgress:
    """Progress summary."""

    def test_progress(self) -> None:
        """Progress counts completed days and remaining days."""
        challenge = complete_days(make_challenge(), 3)
        progress = ChallengeEngine.progress(challenge, date(2024, 2, 4))
        assert progress["completed_days"] == 3
        assert progress["days_remaining"] == 4
        assert progress["percentage"] == 42.86
