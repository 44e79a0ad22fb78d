"""Challenge Manager - Discipline challenge lifecycle.

Wraps ChallengeEngine with storage, XP grants and events:
- start (one active challenge per habit, checked after lazy expiry)
- day completion, directly or through a habit completion on a covered day
- rewards unlock automatically once their day offset is reached; the XP of
  each reward is granted exactly once
- difficulty journal, tips, extension
- lazy expiry on every read and on coordinator refresh

Day completion holds the challenge's in-flight guard. A habit completion
that arrives while the challenge is busy is not applied to the challenge.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any
import uuid

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..engines.challenge_engine import ChallengeEngine, ChallengeValidationError
from ..utils import dt_utils
from .base_manager import BaseManager, guard_key

if TYPE_CHECKING:
    from ..type_defs import ChallengeTip, DisciplineChallengeData


class ChallengeManager(BaseManager):
    """Manager for discipline challenges."""

    async def async_setup(self) -> None:
        """Nothing to subscribe to; HabitManager calls apply_habit_completion."""

    # -------------------------------------------------------------------------------------
    # Reads / expiry
    # -------------------------------------------------------------------------------------

    def _get(self, challenge_id: str) -> DisciplineChallengeData:
        challenge = self.store.get(const.DATA_DISCIPLINE_CHALLENGES, challenge_id)
        if challenge is None:
            raise HomeAssistantError(
                const.ERROR_CHALLENGE_NOT_FOUND_FMT.format(challenge_id)
            )
        return challenge  # type: ignore[return-value]

    def _emit_status(self, suffix: str, challenge: DisciplineChallengeData, **extra: Any) -> None:
        self.emit(
            suffix,
            user_id=challenge[const.DATA_USER_ID],
            challenge_id=challenge[const.DATA_ID],
            habit_id=challenge[const.DATA_CHALLENGE_HABIT_ID],
            status=challenge[const.DATA_CHALLENGE_STATUS],
            **extra,
        )

    def _settle_expiry(
        self, challenge: DisciplineChallengeData, today: date | None = None
    ) -> tuple[DisciplineChallengeData, bool]:
        """Apply lazy expiry. Returns (challenge, changed) and stores any change."""
        updated = ChallengeEngine.evaluate_expiry(
            challenge, today or dt_utils.dt_today_local()
        )
        old_status = challenge.get(const.DATA_CHALLENGE_STATUS)
        new_status = updated.get(const.DATA_CHALLENGE_STATUS)
        if new_status == old_status:
            return challenge, False

        self.store.put(const.DATA_DISCIPLINE_CHALLENGES, updated[const.DATA_ID], updated)
        if new_status == const.CHALLENGE_STATUS_FAILED:
            const.LOGGER.info(
                "INFO: Challenge %s failed (%s of %s days completed)",
                updated[const.DATA_ID],
                ChallengeEngine.completed_count(updated),
                updated.get(const.DATA_CHALLENGE_DURATION),
            )
            self._emit_status(const.SIGNAL_SUFFIX_CHALLENGE_FAILED, updated)
        else:
            const.LOGGER.info("INFO: Challenge %s completed", updated[const.DATA_ID])
            self._emit_status(const.SIGNAL_SUFFIX_CHALLENGE_COMPLETED, updated)
        return updated, True

    def evaluate_all_expiry(self, today: date | None = None) -> bool:
        """Settle every active challenge whose range has passed."""
        changed = False
        for challenge in self.store.query(
            const.DATA_DISCIPLINE_CHALLENGES,
            const.DATA_CHALLENGE_STATUS,
            const.CHALLENGE_STATUS_ACTIVE,
        ):
            if self.coordinator.is_busy(
                guard_key(const.GUARD_PREFIX_CHALLENGE, challenge[const.DATA_ID])
            ):
                continue
            _, settled = self._settle_expiry(challenge, today)  # type: ignore[arg-type]
            changed = changed or settled
        return changed

    def list_challenges(
        self, habit_id: str | None = None, user_id: str | None = None
    ) -> list[DisciplineChallengeData]:
        """Return challenges (optionally for one habit or user), expiry applied."""
        if habit_id is not None:
            records = self.store.query(
                const.DATA_DISCIPLINE_CHALLENGES, const.DATA_CHALLENGE_HABIT_ID, habit_id
            )
        elif user_id is not None:
            records = self.store.query(
                const.DATA_DISCIPLINE_CHALLENGES, const.DATA_USER_ID, user_id
            )
        else:
            records = self.store.all(const.DATA_DISCIPLINE_CHALLENGES)
        return [self._settle_expiry(record)[0] for record in records]  # type: ignore[arg-type]

    def active_challenge_for(self, habit_id: str) -> DisciplineChallengeData | None:
        """Return the habit's active challenge after lazy expiry, if any."""
        for challenge in self.list_challenges(habit_id=habit_id):
            if challenge.get(const.DATA_CHALLENGE_STATUS) == const.CHALLENGE_STATUS_ACTIVE:
                return challenge
        return None

    async def async_get_challenge(self, challenge_id: str) -> dict[str, Any]:
        """Return a challenge with its progress view. Persists a lazy expiry."""
        challenge, changed = self._settle_expiry(self._get(challenge_id))
        if changed:
            await self.coordinator.async_persist()
        view: dict[str, Any] = dict(challenge)
        view["progress"] = ChallengeEngine.progress(challenge, dt_utils.dt_today_local())
        return view

    # -------------------------------------------------------------------------------------
    # Start
    # -------------------------------------------------------------------------------------

    async def async_start_challenge(
        self, habit_id: str, duration: int, start_date: date | None = None
    ) -> DisciplineChallengeData:
        """Start a challenge for a habit.

        Raises:
            HomeAssistantError: unknown habit, invalid duration, or an active
                challenge already exists for the habit
        """
        habit = self.coordinator.habit_manager.get_habit(habit_id)
        with self.coordinator.aggregate_guard(
            guard_key(const.GUARD_PREFIX_CHALLENGE_HABIT, habit_id)
        ):
            existing = self.list_challenges(habit_id=habit_id)
            try:
                ChallengeEngine.ensure_no_active(existing, habit_id)
                challenge = ChallengeEngine.create(
                    str(uuid.uuid4()),
                    habit[const.DATA_USER_ID],
                    habit_id,
                    duration,
                    start_date or dt_utils.dt_today_local(),
                )
            except ChallengeValidationError as err:
                raise HomeAssistantError(str(err)) from err

            self.store.put(const.DATA_DISCIPLINE_CHALLENGES, challenge["id"], challenge)
            const.LOGGER.info(
                "INFO: Started %s-day challenge for habit '%s' (%s to %s)",
                duration,
                habit.get(const.DATA_NAME),
                challenge["start_date"],
                challenge["end_date"],
            )
            self._emit_status(const.SIGNAL_SUFFIX_CHALLENGE_STARTED, challenge)
            await self.coordinator.async_persist()
        return challenge

    # -------------------------------------------------------------------------------------
    # Day completion
    # -------------------------------------------------------------------------------------

    def _apply_day(
        self, challenge: DisciplineChallengeData, day: date
    ) -> DisciplineChallengeData:
        """Mark day, unlock reached rewards, grant their XP. Caller persists."""
        updated = ChallengeEngine.mark_day_complete(challenge, day)
        if updated.get(const.DATA_CHALLENGE_COMPLETED_DAYS) == challenge.get(
            const.DATA_CHALLENGE_COMPLETED_DAYS
        ):
            return challenge

        user_id = updated[const.DATA_USER_ID]
        unlocked: list[tuple[str, int]] = []
        for reward in ChallengeEngine.pending_rewards(updated):
            updated, xp = ChallengeEngine.unlock_reward(updated, reward["id"])
            unlocked.append((reward["id"], xp))

        self.store.put(const.DATA_DISCIPLINE_CHALLENGES, updated[const.DATA_ID], updated)
        self._emit_status(
            const.SIGNAL_SUFFIX_CHALLENGE_DAY_COMPLETED, updated, date=day.isoformat()
        )

        for reward_id, xp in unlocked:
            if xp:
                self.coordinator.stats_manager.add_xp(
                    user_id, xp, const.XP_SOURCE_CHALLENGE_REWARD
                )
            const.LOGGER.info(
                "INFO: Challenge %s unlocked reward %s (+%s XP)",
                updated[const.DATA_ID],
                reward_id,
                xp,
            )
            self._emit_status(
                const.SIGNAL_SUFFIX_CHALLENGE_REWARD_UNLOCKED,
                updated,
                reward_id=reward_id,
                xp=xp,
            )

        if (
            challenge.get(const.DATA_CHALLENGE_STATUS) == const.CHALLENGE_STATUS_ACTIVE
            and updated.get(const.DATA_CHALLENGE_STATUS)
            == const.CHALLENGE_STATUS_COMPLETED
        ):
            const.LOGGER.info("INFO: Challenge %s completed", updated[const.DATA_ID])
            self._emit_status(const.SIGNAL_SUFFIX_CHALLENGE_COMPLETED, updated)
        return updated

    async def async_complete_day(
        self, challenge_id: str, day: date | None = None
    ) -> DisciplineChallengeData:
        """Mark a challenge day completed. Idempotent per date."""
        with self.coordinator.aggregate_guard(
            guard_key(const.GUARD_PREFIX_CHALLENGE, challenge_id)
        ):
            challenge, _ = self._settle_expiry(self._get(challenge_id))
            challenge = self._apply_day(challenge, day or dt_utils.dt_today_local())
            await self.coordinator.async_persist()
        return challenge

    def apply_habit_completion(self, habit_id: str, day: date) -> None:
        """Carry a habit completion into the habit's active challenge."""
        challenge = self.active_challenge_for(habit_id)
        if challenge is None or not ChallengeEngine.covers(challenge, day):
            return
        key = guard_key(const.GUARD_PREFIX_CHALLENGE, challenge[const.DATA_ID])
        if self.coordinator.is_busy(key):
            const.LOGGER.warning(
                "WARNING: Challenge %s busy, habit completion on %s not applied",
                challenge[const.DATA_ID],
                day.isoformat(),
            )
            return
        self._apply_day(challenge, day)

    # -------------------------------------------------------------------------------------
    # Journal / rewards / tips / extension
    # -------------------------------------------------------------------------------------

    async def async_record_difficulty(
        self, challenge_id: str, score: int, day: date | None = None
    ) -> DisciplineChallengeData:
        """Upsert the difficulty score for a day (1..10)."""
        with self.coordinator.aggregate_guard(
            guard_key(const.GUARD_PREFIX_CHALLENGE, challenge_id)
        ):
            challenge = self._get(challenge_id)
            try:
                updated = ChallengeEngine.record_difficulty(
                    challenge, day or dt_utils.dt_today_local(), score
                )
            except ChallengeValidationError as err:
                raise HomeAssistantError(str(err)) from err
            self.store.put(const.DATA_DISCIPLINE_CHALLENGES, challenge_id, updated)
            await self.coordinator.async_persist()
        return updated

    async def async_unlock_reward(
        self, challenge_id: str, reward_id: str
    ) -> tuple[DisciplineChallengeData, int]:
        """Unlock a reached reward and grant its XP once.

        Returns:
            (challenge, xp granted). xp is 0 for an already unlocked reward.
        """
        with self.coordinator.aggregate_guard(
            guard_key(const.GUARD_PREFIX_CHALLENGE, challenge_id)
        ):
            challenge = self._get(challenge_id)
            reward = next(
                (
                    r
                    for r in challenge.get(const.DATA_CHALLENGE_REWARDS, [])
                    if r.get(const.DATA_REWARD_ID) == reward_id
                ),
                None,
            )
            if reward is None:
                raise HomeAssistantError(
                    const.ERROR_REWARD_NOT_FOUND_FMT.format(reward_id, challenge_id)
                )
            if ChallengeEngine.completed_count(challenge) < reward.get(
                const.DATA_REWARD_DAY, 0
            ):
                raise HomeAssistantError(
                    const.ERROR_REWARD_NOT_ELIGIBLE_FMT.format(
                        reward_id, reward.get(const.DATA_REWARD_DAY)
                    )
                )

            updated, xp = ChallengeEngine.unlock_reward(challenge, reward_id)
            if xp == 0 and reward.get(const.DATA_REWARD_UNLOCKED):
                return challenge, 0

            self.store.put(const.DATA_DISCIPLINE_CHALLENGES, challenge_id, updated)
            if xp:
                self.coordinator.stats_manager.add_xp(
                    updated[const.DATA_USER_ID], xp, const.XP_SOURCE_CHALLENGE_REWARD
                )
            self._emit_status(
                const.SIGNAL_SUFFIX_CHALLENGE_REWARD_UNLOCKED,
                updated,
                reward_id=reward_id,
                xp=xp,
            )
            await self.coordinator.async_persist()
        return updated, xp

    async def async_get_next_tip(self, challenge_id: str) -> ChallengeTip | None:
        """Return the tip for the upcoming day and mark it shown."""
        with self.coordinator.aggregate_guard(
            guard_key(const.GUARD_PREFIX_CHALLENGE, challenge_id)
        ):
            challenge = self._get(challenge_id)
            tip = ChallengeEngine.next_tip(challenge)
            if tip is None:
                return None
            updated = ChallengeEngine.mark_tip_shown(challenge, tip["id"])
            self.store.put(const.DATA_DISCIPLINE_CHALLENGES, challenge_id, updated)
            await self.coordinator.async_persist()
        return tip

    async def async_extend_challenge(
        self, challenge_id: str, extra_days: int
    ) -> DisciplineChallengeData:
        """Extend an active challenge by extra_days.

        Raises:
            HomeAssistantError: not active (expiry is applied first),
                extra_days <= 0, or a total duration above 365 days
        """
        with self.coordinator.aggregate_guard(
            guard_key(const.GUARD_PREFIX_CHALLENGE, challenge_id)
        ):
            challenge, expired = self._settle_expiry(self._get(challenge_id))
            try:
                updated = ChallengeEngine.extend(challenge, extra_days)
            except ChallengeValidationError as err:
                if expired:
                    await self.coordinator.async_persist()
                raise HomeAssistantError(str(err)) from err

            self.store.put(const.DATA_DISCIPLINE_CHALLENGES, challenge_id, updated)
            const.LOGGER.info(
                "INFO: Challenge %s extended by %s days to %s",
                challenge_id,
                extra_days,
                updated[const.DATA_CHALLENGE_END_DATE],
            )
            self._emit_status(
                const.SIGNAL_SUFFIX_CHALLENGE_EXTENDED,
                updated,
                date=updated[const.DATA_CHALLENGE_END_DATE],
            )
            await self.coordinator.async_persist()
        return updated
