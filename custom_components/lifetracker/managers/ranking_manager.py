"""Ranking Manager - Workout challenges, participants and leaderboards.

Participant streaks are recomputed from the user's workout history with
RankingEngine whenever a workout is recorded, and again on every ranking
read so a streak that lapsed overnight is not shown stale. The creator's
streak is mirrored onto the challenge, which is marked completed once it
reaches target_days.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any
import uuid

from homeassistant.core import callback
from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..engines.ranking_engine import RankingEngine
from ..utils import dt_utils
from .base_manager import BaseManager, guard_key

if TYPE_CHECKING:
    from ..type_defs import ChallengeParticipantData, WorkoutChallengeData


class RankingManager(BaseManager):
    """Manager for workout challenges and their participants."""

    async def async_setup(self) -> None:
        """Subscribe to recorded workouts."""
        self.listen(const.SIGNAL_SUFFIX_WORKOUT_RECORDED, self._on_workout_recorded)

    @callback
    def _on_workout_recorded(self, payload: dict[str, Any]) -> None:
        """Refresh every participation of the user who worked out."""
        user_id = payload.get("user_id")
        if not user_id:
            return
        for participant in self.store.query(
            const.DATA_CHALLENGE_PARTICIPANTS, const.DATA_USER_ID, user_id
        ):
            self.refresh_participant(participant[const.DATA_ID])

    # -------------------------------------------------------------------------------------
    # Challenges
    # -------------------------------------------------------------------------------------

    def get_challenge(self, challenge_id: str) -> WorkoutChallengeData:
        """Return a workout challenge or raise HomeAssistantError."""
        challenge = self.store.get(const.DATA_WORKOUT_CHALLENGES, challenge_id)
        if challenge is None:
            raise HomeAssistantError(
                const.ERROR_WORKOUT_CHALLENGE_NOT_FOUND_FMT.format(challenge_id)
            )
        return challenge  # type: ignore[return-value]

    async def async_create_workout_challenge(
        self,
        creator_id: str,
        name: str,
        target_days: int,
        modality: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        display_name: str | None = None,
    ) -> WorkoutChallengeData:
        """Create a workout challenge and join the creator to it."""
        start = start_date or dt_utils.dt_today_local()
        if end_date is not None and end_date < start:
            raise HomeAssistantError(const.ERROR_INVALID_DATE_FMT.format(end_date))

        challenge: WorkoutChallengeData = {
            "id": str(uuid.uuid4()),
            "name": name,
            "creator_id": creator_id,
            "target_days": int(target_days),
            "modality": modality or None,
            "start_date": start.isoformat(),
            "end_date": end_date.isoformat() if end_date else None,
            "current_streak": 0,
            "completed": False,
            "created_at": dt_utils.dt_now_iso(),
        }
        self.store.put(const.DATA_WORKOUT_CHALLENGES, challenge["id"], challenge)
        const.LOGGER.info(
            "INFO: Created workout challenge '%s' (%s days)", name, target_days
        )
        self._join(challenge["id"], creator_id, display_name)
        await self.coordinator.async_persist()
        return self.get_challenge(challenge["id"])

    # -------------------------------------------------------------------------------------
    # Participants
    # -------------------------------------------------------------------------------------

    @staticmethod
    def participant_id(challenge_id: str, user_id: str) -> str:
        """Participant record id for a (challenge, user) pair."""
        return f"{challenge_id}_{user_id}"

    def _join(
        self, challenge_id: str, user_id: str, display_name: str | None
    ) -> ChallengeParticipantData:
        record_id = self.participant_id(challenge_id, user_id)
        existing = self.store.get(const.DATA_CHALLENGE_PARTICIPANTS, record_id)
        if existing is not None:
            return existing  # type: ignore[return-value]

        participant: ChallengeParticipantData = {
            "id": record_id,
            "challenge_id": challenge_id,
            "user_id": user_id,
            "display_name": display_name or const.DEFAULT_DISPLAY_NAME,
            "current_streak": 0,
            "total_workouts": 0,
            "last_workout_date": None,
        }
        self.store.put(const.DATA_CHALLENGE_PARTICIPANTS, record_id, participant)
        const.LOGGER.debug("DEBUG: User %s joined challenge %s", user_id, challenge_id)
        return self.refresh_participant(record_id)

    async def async_join(
        self, challenge_id: str, user_id: str, display_name: str | None = None
    ) -> ChallengeParticipantData:
        """Join a workout challenge. Joining twice returns the existing record."""
        self.get_challenge(challenge_id)
        with self.coordinator.aggregate_guard(
            guard_key(
                const.GUARD_PREFIX_PARTICIPANT,
                self.participant_id(challenge_id, user_id),
            )
        ):
            participant = self._join(challenge_id, user_id, display_name)
            await self.coordinator.async_persist()
        return participant

    def refresh_participant(
        self, participant_id: str, today: date | None = None
    ) -> ChallengeParticipantData:
        """Recompute a participant's streak and totals from their workouts."""
        participant = self.store.get(const.DATA_CHALLENGE_PARTICIPANTS, participant_id)
        if participant is None:
            raise HomeAssistantError(
                const.ERROR_PARTICIPANT_NOT_FOUND_FMT.format(participant_id)
            )
        challenge = self.get_challenge(participant[const.DATA_PARTICIPANT_CHALLENGE_ID])
        period_start = dt_utils.dt_parse_date(
            challenge.get(const.DATA_WORKOUT_CHALLENGE_START_DATE)
        )
        if period_start is None:
            const.LOGGER.warning(
                "WARNING: Workout challenge %s has no valid start date",
                challenge[const.DATA_ID],
            )
            return participant  # type: ignore[return-value]

        workouts = self.store.query(
            const.DATA_WORKOUTS, const.DATA_USER_ID, participant[const.DATA_USER_ID]
        )
        updated = RankingEngine.update_participant(
            participant,  # type: ignore[arg-type]
            workouts,
            period_start,
            dt_utils.dt_parse_date(challenge.get(const.DATA_WORKOUT_CHALLENGE_END_DATE)),
            today or dt_utils.dt_today_local(),
            challenge.get(const.DATA_WORKOUT_CHALLENGE_MODALITY),
        )
        if updated != participant:
            self.store.put(const.DATA_CHALLENGE_PARTICIPANTS, participant_id, updated)
            self.emit(
                const.SIGNAL_SUFFIX_PARTICIPANT_UPDATED,
                user_id=updated[const.DATA_USER_ID],
                challenge_id=challenge[const.DATA_ID],
                current_streak=updated[const.DATA_PARTICIPANT_CURRENT_STREAK],
                total_workouts=updated[const.DATA_PARTICIPANT_TOTAL_WORKOUTS],
            )

        if updated[const.DATA_USER_ID] == challenge.get(
            const.DATA_WORKOUT_CHALLENGE_CREATOR_ID
        ):
            self._sync_creator_streak(challenge, updated[const.DATA_PARTICIPANT_CURRENT_STREAK])
        return updated

    def _sync_creator_streak(self, challenge: WorkoutChallengeData, streak: int) -> None:
        completed = bool(challenge.get(const.DATA_WORKOUT_CHALLENGE_COMPLETED)) or (
            RankingEngine.is_target_reached(
                streak, int(challenge.get(const.DATA_WORKOUT_CHALLENGE_TARGET_DAYS, 0))
            )
        )
        if (
            challenge.get(const.DATA_WORKOUT_CHALLENGE_CURRENT_STREAK) == streak
            and challenge.get(const.DATA_WORKOUT_CHALLENGE_COMPLETED) == completed
        ):
            return
        if completed and not challenge.get(const.DATA_WORKOUT_CHALLENGE_COMPLETED):
            const.LOGGER.info(
                "INFO: Workout challenge '%s' reached its target of %s days",
                challenge.get(const.DATA_NAME),
                challenge.get(const.DATA_WORKOUT_CHALLENGE_TARGET_DAYS),
            )
        challenge[const.DATA_WORKOUT_CHALLENGE_CURRENT_STREAK] = streak
        challenge[const.DATA_WORKOUT_CHALLENGE_COMPLETED] = completed
        self.store.put(const.DATA_WORKOUT_CHALLENGES, challenge[const.DATA_ID], challenge)

    # -------------------------------------------------------------------------------------
    # Ranking
    # -------------------------------------------------------------------------------------

    def get_ranking(
        self, challenge_id: str, today: date | None = None
    ) -> list[dict[str, Any]]:
        """Return the leaderboard with 1-based positions."""
        self.get_challenge(challenge_id)
        participants = [
            self.refresh_participant(record[const.DATA_ID], today)
            for record in self.store.query(
                const.DATA_CHALLENGE_PARTICIPANTS,
                const.DATA_PARTICIPANT_CHALLENGE_ID,
                challenge_id,
            )
        ]
        return [
            {**participant, "position": position}
            for position, participant in enumerate(
                RankingEngine.rank(participants), start=1
            )
        ]

    async def async_get_ranking(self, challenge_id: str) -> list[dict[str, Any]]:
        """Leaderboard read; persists refreshed streaks."""
        ranking = self.get_ranking(challenge_id)
        await self.coordinator.async_persist()
        return ranking
