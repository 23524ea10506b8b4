"""Advancement and loadout rules for heartforge.

This package holds every rule in a single place.  It exposes:

* Dataclasses describing options, history entries and loadouts (see :mod:`models`).
* Enumerations used across the rules layer (see :mod:`enums`).
* Rule configuration objects (see :mod:`rules_config`) and static content.
* Pure rule functions: the tier model, the history tally, the level-up
  validator and the loadout engine.

Everything here operates in memory and is persisted through a thin
repository adapter.
"""

from . import (
    content,
    enums,
    history,
    leveling,
    loadout,
    models,
    rules_config,
    tiers,
)

__all__ = [
    "content",
    "enums",
    "history",
    "leveling",
    "loadout",
    "models",
    "rules_config",
    "tiers",
]
