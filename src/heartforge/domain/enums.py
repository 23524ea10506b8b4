"""Enumerations shared by the advancement and loadout rules."""

from __future__ import annotations

from enum import StrEnum


class Tier(StrEnum):
    """Level bands sharing one option catalog and one loadout ruleset."""

    TIER_1 = "1"
    TIER_2_4 = "2-4"
    TIER_5_7 = "5-7"
    TIER_8_10 = "8-10"


class OptionFamilyKind(StrEnum):
    """Advancement option families that take part in gating."""

    STANDARD = "standard"
    SUBCLASS_UPGRADE = "subclass_upgrade"
    MULTICLASS = "multiclass"


class LevelUpError(StrEnum):
    """Reasons a proposed level-up selection is rejected."""

    UNKNOWN_OPTION = "unknown_option"
    OVER_ALLOWANCE = "over_allowance"
    OVER_BUDGET = "over_budget"
    GATED_CHOICE = "gated_choice"
    NO_SPENDING_AT_TIER_1 = "no_spending_at_tier_1"


class LoadoutMode(StrEnum):
    """Which domains a character may draw cards from."""

    CLASS_DOMAINS = "class-domains"
    ALL_DOMAINS = "all-domains"


class LoadoutPile(StrEnum):
    """The two piles a domain card can live in."""

    ACTIVE = "active"
    VAULT = "vault"


class LoadoutOutcome(StrEnum):
    """Result codes for loadout edits."""

    ADDED = "added"
    REMOVED = "removed"
    MOVED = "moved"
    SWAPPED = "swapped"
    ACTIVE_FULL = "active_full"
    VAULT_FULL = "vault_full"
    DOMAIN_NOT_ELIGIBLE = "domain_not_eligible"
    LEVEL_TOO_HIGH = "level_too_high"
    NOT_FOUND = "not_found"


class AutomaticBenefit(StrEnum):
    """Benefits granted by a level-up without spending points."""

    NEW_EXPERIENCE = "new_experience"
    PROFICIENCY_BONUS = "proficiency_bonus"
    CLEAR_TRAIT_MARKS = "clear_trait_marks"
    DAMAGE_THRESHOLDS = "damage_thresholds"
    DOMAIN_CARD = "domain_card"
