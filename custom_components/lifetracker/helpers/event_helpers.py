# File: helpers/event_helpers.py
"""Event signal helpers for manager communication."""

from __future__ import annotations

from .. import const


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Each LifeTracker config entry gets its own signal namespace, so managers
    of two entries never hear each other.

    Format: 'lifetracker_{entry_id}_{suffix}'

    Example:
        >>> get_event_signal("abc123", const.SIGNAL_SUFFIX_BADGE_EARNED)
        'lifetracker_abc123_badge_earned'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"
