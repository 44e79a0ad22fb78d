# File: helpers/__init__.py
"""Home Assistant-bound helper functions for LifeTracker.

NOTE: Functions that need `hass` object belong here, NOT in utils/.

Submodules:
    - event_helpers: Instance-scoped dispatcher signal names
    - service_helpers: Config entry lookup and user resolution for services
"""

from . import event_helpers, service_helpers

__all__ = ["event_helpers", "service_helpers"]
