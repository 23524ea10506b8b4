"""History tally: derive gating facts from a character's level-up entries.

Everything here is recomputed from the full history on every call.  There
are no running counters, so undoing or re-ordering entries can never leave
stale derived state behind.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping

from .content import OPTION_CATALOGS
from .enums import Tier
from .models import Catalog, HistoryFlags, LevelUpEntry, OptionFamily
from .tiers import tier_for_level


def option_family(
    key: str,
    tier: Tier,
    *,
    catalogs: Mapping[Tier, Catalog] | None = None,
) -> OptionFamily:
    """Family of ``key`` as defined by ``tier``'s catalog.

    Keys the catalog no longer knows (retired or homebrew content) fall back
    to the naming convention.
    """

    source = OPTION_CATALOGS if catalogs is None else catalogs
    definition = source.get(tier, {}).get(key)
    if definition is not None:
        return definition.family
    return OptionFamily.from_key(key)


def _positive(selections: Mapping[str, int]) -> Iterable[tuple[str, int]]:
    return ((key, count) for key, count in selections.items() if count > 0)


def tally_history(
    history: Iterable[LevelUpEntry],
    target_level: int,
    tier: Tier | None = None,
    *,
    catalogs: Mapping[Tier, Catalog] | None = None,
) -> HistoryFlags:
    """Summarise prior choices relevant to resolving ``target_level``.

    Tier-scoped facts only consider entries in the same tier as the target
    with a lower level; array order is irrelevant.  ``had_multiclass_ever``
    scans the whole history.
    """

    entries = list(history)
    target_tier = tier if tier is not None else tier_for_level(target_level)

    taken: Counter[str] = Counter()
    flags = HistoryFlags()
    for entry in entries:
        entry_tier = tier_for_level(entry.level)
        prior_in_tier = entry_tier == target_tier and entry.level < target_level
        for key, count in _positive(entry.selections):
            family = option_family(key, entry_tier, catalogs=catalogs)
            if family.is_multiclass:
                flags.had_multiclass_ever = True
            if not prior_in_tier:
                continue
            taken[key] += count
            if family.is_multiclass:
                flags.had_multiclass_in_tier = True
            elif family.is_subclass_upgrade:
                flags.had_subclass_upgrade_in_tier = True

    flags.prior_taken_in_tier = dict(taken)
    return flags


def lifetime_taken(history: Iterable[LevelUpEntry]) -> dict[str, int]:
    """Total times each option was chosen across the whole history."""

    totals: Counter[str] = Counter()
    for entry in history:
        for key, count in _positive(entry.selections):
            totals[key] += count
    return dict(totals)
