"""Declarative rule configuration for advancement and loadouts."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import Tier


@dataclass(frozen=True, slots=True)
class ProgressionRules:
    """Level range and level-up point constants."""

    min_level: int = 1
    max_level: int = 10
    points_per_level: int = 2
    new_experience_levels: tuple[int, ...] = (2, 5, 8)


@dataclass(frozen=True, slots=True)
class LoadoutRules:
    """Capacity and eligibility limits for one tier."""

    max_active_cards: int = 5
    max_vault_cards: int | None = None  # None means unlimited
    max_card_level: int = 1
    max_recall_cost: int | None = None

    def __post_init__(self) -> None:
        if self.max_active_cards < 1:
            raise ValueError("max_active_cards must be at least 1")
        if self.max_vault_cards is not None and self.max_vault_cards < 0:
            raise ValueError("max_vault_cards cannot be negative")
        if not 1 <= self.max_card_level <= 10:
            raise ValueError("max_card_level must be between 1 and 10")


def _default_loadout_rules() -> dict[Tier, LoadoutRules]:
    return {
        Tier.TIER_1: LoadoutRules(max_card_level=1),
        Tier.TIER_2_4: LoadoutRules(max_card_level=4),
        Tier.TIER_5_7: LoadoutRules(max_card_level=7),
        Tier.TIER_8_10: LoadoutRules(max_card_level=10),
    }


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container."""

    progression: ProgressionRules = ProgressionRules()
    loadout_by_tier: dict[Tier, LoadoutRules] = field(default_factory=_default_loadout_rules)


DEFAULT_RULES = RulesConfig()
