"""Tier model: level bands, option catalogs and per-tier constants."""

from __future__ import annotations

from collections.abc import Mapping

from .content import OPTION_CATALOGS
from .enums import AutomaticBenefit, Tier
from .models import Catalog
from .rules_config import DEFAULT_RULES, LoadoutRules, RulesConfig

_TIER_BANDS: tuple[tuple[Tier, int, int], ...] = (
    (Tier.TIER_1, 1, 1),
    (Tier.TIER_2_4, 2, 4),
    (Tier.TIER_5_7, 5, 7),
    (Tier.TIER_8_10, 8, 10),
)


def clamp_level(level: int, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Clamp a level into the playable range."""

    progression = rules.progression
    return max(progression.min_level, min(progression.max_level, int(level)))


def tier_for_level(level: int) -> Tier:
    """Return the tier for a level, clamping out-of-range input first."""

    clamped = max(1, min(10, int(level)))
    for tier, low, high in _TIER_BANDS:
        if low <= clamped <= high:
            return tier
    raise AssertionError(f"tier bands do not cover level {clamped}")  # pragma: no cover


def levels_in_tier(tier: Tier) -> range:
    for band, low, high in _TIER_BANDS:
        if band == tier:
            return range(low, high + 1)
    raise KeyError(tier)


def tier_changed(current_level: int, target_level: int) -> bool:
    """Whether levelling from ``current_level`` to ``target_level`` enters a new tier."""

    return tier_for_level(current_level) != tier_for_level(target_level)


def options_for_tier(tier: Tier, *, catalogs: Mapping[Tier, Catalog] | None = None) -> Catalog:
    """Return the advancement catalog for a tier.

    A custom ``catalogs`` mapping must cover the requested tier; a gap is a
    content bug and surfaces as ``KeyError``.
    """

    source = OPTION_CATALOGS if catalogs is None else catalogs
    return dict(source[tier])


def points_budget(rules: RulesConfig = DEFAULT_RULES) -> int:
    """Points granted by every level-up, regardless of tier."""

    return rules.progression.points_per_level


def loadout_rules_for_tier(tier: Tier, rules: RulesConfig = DEFAULT_RULES) -> LoadoutRules:
    return rules.loadout_by_tier[tier]


def automatic_benefits(
    level: int,
    is_tier_change: bool,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[AutomaticBenefit]:
    """Benefits a character receives on reaching ``level`` before spending points."""

    benefits: list[AutomaticBenefit] = []
    if level in rules.progression.new_experience_levels:
        benefits.append(AutomaticBenefit.NEW_EXPERIENCE)
        benefits.append(AutomaticBenefit.PROFICIENCY_BONUS)
    if is_tier_change and level > 1:
        benefits.append(AutomaticBenefit.CLEAR_TRAIT_MARKS)
    benefits.append(AutomaticBenefit.DAMAGE_THRESHOLDS)
    benefits.append(AutomaticBenefit.DOMAIN_CARD)
    return benefits
