"""Level-up decision rules: scoring, allowances and family gating."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .enums import LevelUpError, OptionFamilyKind, Tier
from .history import tally_history
from .models import Catalog, Character, HistoryFlags, LevelUpEntry
from .rules_config import DEFAULT_RULES, RulesConfig
from .tiers import clamp_level, options_for_tier, points_budget, tier_for_level


@dataclass(slots=True)
class ValidationResult:
    """Outcome of scoring a proposed selection."""

    total_cost: int = 0
    error: LevelUpError | None = None
    option_key: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(
        cls, error: LevelUpError, option_key: str | None = None, *, total_cost: int = 0
    ) -> ValidationResult:
        return cls(total_cost=total_cost, error=error, option_key=option_key)


@dataclass(slots=True)
class OptionAvailability:
    """Picker-facing view of one catalog option."""

    key: str
    cost: int
    max_selections: int
    remaining: int
    selected: int
    gated: bool


def _chosen(selections: Mapping[str, int]) -> dict[str, int]:
    return {key: count for key, count in selections.items() if count > 0}


def _keys_of_family(chosen: Mapping[str, int], catalog: Catalog, kind: OptionFamilyKind) -> list[str]:
    return [key for key in chosen if key in catalog and catalog[key].family.kind is kind]


def _subclass_upgrade_gated(history: HistoryFlags, picks_multiclass: bool) -> bool:
    return history.had_multiclass_in_tier or picks_multiclass


def _multiclass_gated(history: HistoryFlags, picks_subclass_upgrade: bool) -> bool:
    return (
        history.had_subclass_upgrade_in_tier
        or history.had_multiclass_ever
        or picks_subclass_upgrade
    )


def _second_multiclass_key(chosen: Mapping[str, int], multiclass_keys: list[str]) -> str | None:
    """Key that pushes the selection past a single multiclass pick, if any."""

    picked = 0
    for key in multiclass_keys:
        picked += chosen[key]
        if picked > 1:
            return key
    return None


def validate_selection(
    selections: Mapping[str, int],
    tier: Tier,
    history: HistoryFlags,
    catalog: Catalog,
    *,
    select_any: bool = False,
    rules: RulesConfig = DEFAULT_RULES,
) -> ValidationResult:
    """Score a proposed ``{option key: count}`` selection.

    Rule violations are returned as a failed ``ValidationResult``; nothing
    is raised for user input.  ``select_any`` is the explicit GM bypass: it
    skips budget and gating and reports a total cost of zero, while unknown
    keys, the remaining per-tier allowance and the single multiclass pick
    are still enforced.

    Gating is evaluated before the budget so that combining a subclass
    upgrade with a multiclass choice, or two multiclass choices, is always
    reported as gated.
    """

    chosen = _chosen(selections)
    if not chosen:
        return ValidationResult()

    if tier == Tier.TIER_1:
        return ValidationResult.failure(LevelUpError.NO_SPENDING_AT_TIER_1)

    for key in chosen:
        if key not in catalog:
            return ValidationResult.failure(LevelUpError.UNKNOWN_OPTION, key)

    for key, count in chosen.items():
        remaining = catalog[key].max_selections - history.taken(key)
        if count > remaining:
            return ValidationResult.failure(LevelUpError.OVER_ALLOWANCE, key)

    subclass_keys = _keys_of_family(chosen, catalog, OptionFamilyKind.SUBCLASS_UPGRADE)
    multiclass_keys = _keys_of_family(chosen, catalog, OptionFamilyKind.MULTICLASS)
    # each target class has its own key, but a character multiclasses once
    extra_multiclass = _second_multiclass_key(chosen, multiclass_keys)

    if select_any:
        if extra_multiclass is not None:
            return ValidationResult.failure(LevelUpError.OVER_ALLOWANCE, extra_multiclass)
        return ValidationResult(total_cost=0)

    total_cost = sum(count * catalog[key].cost for key, count in chosen.items())

    if subclass_keys and _subclass_upgrade_gated(history, bool(multiclass_keys)):
        return ValidationResult.failure(
            LevelUpError.GATED_CHOICE, subclass_keys[0], total_cost=total_cost
        )
    if multiclass_keys and _multiclass_gated(history, bool(subclass_keys)):
        return ValidationResult.failure(
            LevelUpError.GATED_CHOICE, multiclass_keys[0], total_cost=total_cost
        )
    if extra_multiclass is not None:
        return ValidationResult.failure(
            LevelUpError.GATED_CHOICE, extra_multiclass, total_cost=total_cost
        )

    if total_cost > points_budget(rules):
        return ValidationResult.failure(LevelUpError.OVER_BUDGET, total_cost=total_cost)

    return ValidationResult(total_cost=total_cost)


def option_availability(
    history: HistoryFlags,
    catalog: Catalog,
    selections: Mapping[str, int] | None = None,
) -> dict[str, OptionAvailability]:
    """Remaining allowance and gating state of every option in ``catalog``."""

    chosen = _chosen(selections or {})
    picks_subclass = bool(_keys_of_family(chosen, catalog, OptionFamilyKind.SUBCLASS_UPGRADE))
    multiclass_picks = _keys_of_family(chosen, catalog, OptionFamilyKind.MULTICLASS)

    availability: dict[str, OptionAvailability] = {}
    for key, option in catalog.items():
        if option.family.is_subclass_upgrade:
            gated = _subclass_upgrade_gated(history, bool(multiclass_picks))
        elif option.family.is_multiclass:
            other_class_picked = any(picked != key for picked in multiclass_picks)
            gated = _multiclass_gated(history, picks_subclass) or other_class_picked
        else:
            gated = False
        availability[key] = OptionAvailability(
            key=key,
            cost=option.cost,
            max_selections=option.max_selections,
            remaining=max(0, option.max_selections - history.taken(key)),
            selected=chosen.get(key, 0),
            gated=gated,
        )
    return availability


def evaluate_level_up(
    history: Iterable[LevelUpEntry],
    target_level: int,
    selections: Mapping[str, int],
    *,
    select_any: bool = False,
    catalogs: Mapping[Tier, Catalog] | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> ValidationResult:
    """Derive tier and history flags for ``target_level`` and validate."""

    level = clamp_level(target_level, rules=rules)
    tier = tier_for_level(level)
    flags = tally_history(history, level, tier, catalogs=catalogs)
    catalog = options_for_tier(tier, catalogs=catalogs)
    return validate_selection(
        selections, tier, flags, catalog, select_any=select_any, rules=rules
    )


def next_level(character: Character, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Level the character's next level-up resolves, or raise at the cap."""

    if character.level >= rules.progression.max_level:
        raise ValueError("character is already at maximum level")
    return character.level + 1


def build_entry(
    level: int,
    selections: Mapping[str, int],
    notes: str | None = None,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> LevelUpEntry:
    """Turn an accepted selection into a history entry."""

    if not rules.progression.min_level < level <= rules.progression.max_level:
        raise ValueError(f"level-up entries must target levels 2-10, got {level}")
    cleaned = notes.strip() if notes else None
    return LevelUpEntry(level=level, selections=_chosen(selections), notes=cleaned or None)


def commit_level_up(
    character: Character,
    selections: Mapping[str, int],
    *,
    notes: str | None = None,
    select_any: bool = False,
    catalogs: Mapping[Tier, Catalog] | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> ValidationResult:
    """Validate a level-up for the character's next level and append it on success."""

    target_level = next_level(character, rules=rules)
    result = evaluate_level_up(
        character.history,
        target_level,
        selections,
        select_any=select_any,
        catalogs=catalogs,
        rules=rules,
    )
    if result.ok:
        character.history.append(build_entry(target_level, selections, notes, rules=rules))
        character.level = target_level
    return result


def undo_last_level_up(character: Character) -> LevelUpEntry | None:
    """Remove the most recent entry and step the character back one level."""

    if not character.history:
        return None
    index = max(range(len(character.history)), key=lambda i: (character.history[i].level, i))
    entry = character.history.pop(index)
    character.level = max(1, entry.level - 1)
    return entry
