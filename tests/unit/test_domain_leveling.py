"""Unit tests for level-up validation, commit and undo."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from heartforge.domain import content
from heartforge.domain import models as dm
from heartforge.domain.enums import LevelUpError, OptionFamilyKind, Tier
from heartforge.domain.leveling import (
    build_entry,
    commit_level_up,
    evaluate_level_up,
    option_availability,
    undo_last_level_up,
    validate_selection,
)
from heartforge.domain.models import HistoryFlags, LevelUpEntry, OptionDefinition, OptionFamily
from heartforge.domain.tiers import options_for_tier, points_budget

MULTICLASS_WIZARD = content.multiclass_key("Wizard")
MULTICLASS_BARD = content.multiclass_key("Bard")


def _character(level: int = 1, history: list[LevelUpEntry] | None = None) -> dm.Character:
    return dm.Character(
        id=dm.CharacterID(1),
        name="Marlowe",
        class_name="Sorcerer",
        class_domains=["Arcana", "Midnight"],
        level=level,
        history=history or [],
    )


def test_selection_within_allowance_and_budget_is_accepted():
    catalog = {"Option A": OptionDefinition("Option A", cost=1, max_selections=2)}
    result = validate_selection({"Option A": 2}, Tier.TIER_2_4, HistoryFlags(), catalog)
    assert result.ok
    assert result.total_cost == 2


def test_over_budget_selection_reports_cost():
    catalog = options_for_tier(Tier.TIER_5_7)
    result = validate_selection(
        {content.PROFICIENCY: 1, content.EVASION: 1}, Tier.TIER_5_7, HistoryFlags(), catalog
    )
    assert result.error is LevelUpError.OVER_BUDGET
    assert result.total_cost == 3


def test_multiclass_in_same_tier_gates_subclass_upgrade():
    custom_lower = dict(options_for_tier(Tier.TIER_2_4))
    custom_lower[content.SUBCLASS_UPGRADE] = OptionDefinition(
        content.SUBCLASS_UPGRADE, cost=1, max_selections=1, family=OptionFamily.subclass_upgrade()
    )
    catalogs = {
        Tier.TIER_1: {},
        Tier.TIER_2_4: custom_lower,
        Tier.TIER_5_7: options_for_tier(Tier.TIER_5_7),
        Tier.TIER_8_10: options_for_tier(Tier.TIER_8_10),
    }
    history = [LevelUpEntry(level=2, selections={"Multiclass: Rogue": 1})]

    result = evaluate_level_up(history, 3, {content.SUBCLASS_UPGRADE: 1}, catalogs=catalogs)

    assert result.error is LevelUpError.GATED_CHOICE
    assert result.option_key == content.SUBCLASS_UPGRADE


def test_earlier_multiclass_blocks_second_multiclass_forever():
    history = [LevelUpEntry(level=4, selections={"Multiclass: Rogue": 1})]

    result = evaluate_level_up(history, 6, {MULTICLASS_WIZARD: 1})

    assert result.error is LevelUpError.GATED_CHOICE
    assert result.option_key == MULTICLASS_WIZARD


def test_multiclass_in_earlier_tier_does_not_block_subclass_upgrade():
    history = [LevelUpEntry(level=4, selections={"Multiclass: Rogue": 1})]
    result = evaluate_level_up(history, 6, {content.SUBCLASS_UPGRADE: 1})
    assert result.ok
    assert result.total_cost == 1


def test_subclass_upgrade_in_tier_blocks_multiclass():
    history = [LevelUpEntry(level=5, selections={content.SUBCLASS_UPGRADE: 1})]
    result = evaluate_level_up(history, 6, {MULTICLASS_WIZARD: 1})
    assert result.error is LevelUpError.GATED_CHOICE


def test_combined_gated_families_fail_regardless_of_budget():
    catalog = options_for_tier(Tier.TIER_5_7)
    result = validate_selection(
        {content.SUBCLASS_UPGRADE: 1, MULTICLASS_BARD: 1}, Tier.TIER_5_7, HistoryFlags(), catalog
    )
    assert result.error is LevelUpError.GATED_CHOICE
    assert result.option_key == content.SUBCLASS_UPGRADE
    assert result.total_cost == 3


def test_clean_history_allows_multiclass():
    result = evaluate_level_up([], 5, {MULTICLASS_WIZARD: 1})
    assert result.ok
    assert result.total_cost == 2


def test_tier_one_rejects_any_spending():
    result = validate_selection({content.TRAITS: 1}, Tier.TIER_1, HistoryFlags(), {})
    assert result.error is LevelUpError.NO_SPENDING_AT_TIER_1


def test_empty_or_zero_selection_is_free():
    assert validate_selection({}, Tier.TIER_1, HistoryFlags(), {}).ok
    result = validate_selection(
        {content.TRAITS: 0}, Tier.TIER_2_4, HistoryFlags(), options_for_tier(Tier.TIER_2_4)
    )
    assert result.ok
    assert result.total_cost == 0


def test_unknown_option_is_named():
    result = validate_selection(
        {"Tame a dragon": 1}, Tier.TIER_2_4, HistoryFlags(), options_for_tier(Tier.TIER_2_4)
    )
    assert result.error is LevelUpError.UNKNOWN_OPTION
    assert result.option_key == "Tame a dragon"


def test_upper_tier_option_is_unknown_in_lower_tier():
    result = evaluate_level_up([], 3, {content.PROFICIENCY: 1})
    assert result.error is LevelUpError.UNKNOWN_OPTION


def test_allowance_counts_prior_levels_in_tier():
    history = [
        LevelUpEntry(level=2, selections={content.TRAITS: 1}),
        LevelUpEntry(level=3, selections={content.TRAITS: 1}),
    ]
    over = evaluate_level_up(history, 4, {content.TRAITS: 2})
    assert over.error is LevelUpError.OVER_ALLOWANCE
    assert over.option_key == content.TRAITS

    assert evaluate_level_up(history, 4, {content.TRAITS: 1}).ok


def test_allowance_resets_in_new_tier():
    history = [
        LevelUpEntry(level=2, selections={content.HIT_POINT: 1}),
        LevelUpEntry(level=3, selections={content.HIT_POINT: 1}),
    ]
    assert evaluate_level_up(history, 4, {content.HIT_POINT: 1}).error is LevelUpError.OVER_ALLOWANCE
    assert evaluate_level_up(history, 5, {content.HIT_POINT: 2}).ok


def test_select_any_skips_budget_and_gating():
    catalog = options_for_tier(Tier.TIER_5_7)
    result = validate_selection(
        {content.PROFICIENCY: 1, content.SUBCLASS_UPGRADE: 1, MULTICLASS_BARD: 1},
        Tier.TIER_5_7,
        HistoryFlags(had_multiclass_ever=True),
        catalog,
        select_any=True,
    )
    assert result.ok
    assert result.total_cost == 0


def test_select_any_still_enforces_catalog_and_allowance():
    catalog = options_for_tier(Tier.TIER_5_7)
    unknown = validate_selection(
        {"Tame a dragon": 1}, Tier.TIER_5_7, HistoryFlags(), catalog, select_any=True
    )
    assert unknown.error is LevelUpError.UNKNOWN_OPTION

    over = validate_selection(
        {content.EVASION: 2}, Tier.TIER_5_7, HistoryFlags(), catalog, select_any=True
    )
    assert over.error is LevelUpError.OVER_ALLOWANCE

    tier_one = validate_selection({content.TRAITS: 1}, Tier.TIER_1, HistoryFlags(), {}, select_any=True)
    assert tier_one.error is LevelUpError.NO_SPENDING_AT_TIER_1


def test_validation_does_not_mutate_inputs():
    catalog = options_for_tier(Tier.TIER_2_4)
    flags = HistoryFlags(prior_taken_in_tier={content.TRAITS: 1})
    selections = {content.TRAITS: 1, content.STRESS: 0}
    validate_selection(selections, Tier.TIER_2_4, flags, catalog)
    assert selections == {content.TRAITS: 1, content.STRESS: 0}
    assert flags.prior_taken_in_tier == {content.TRAITS: 1}


def test_option_availability_reports_remaining_and_gating():
    flags = HistoryFlags(prior_taken_in_tier={content.TRAITS: 2}, had_multiclass_ever=True)
    availability = option_availability(
        flags, options_for_tier(Tier.TIER_5_7), {content.SUBCLASS_UPGRADE: 1}
    )

    assert availability[content.TRAITS].remaining == 1
    assert availability[content.SUBCLASS_UPGRADE].selected == 1
    assert not availability[content.SUBCLASS_UPGRADE].gated
    assert availability[MULTICLASS_WIZARD].gated
    assert not availability[content.EVASION].gated


def test_build_entry_drops_zero_counts_and_blank_notes():
    entry = build_entry(3, {content.TRAITS: 1, content.STRESS: 0}, "   ")
    assert entry == LevelUpEntry(level=3, selections={content.TRAITS: 1}, notes=None)


@pytest.mark.parametrize("level", [1, 11])
def test_build_entry_rejects_levels_outside_range(level):
    with pytest.raises(ValueError):
        build_entry(level, {})


def test_commit_appends_entry_and_advances_level():
    character = _character()

    first = commit_level_up(character, {})
    assert first.ok
    assert character.level == 2

    second = commit_level_up(character, {content.TRAITS: 1, content.STRESS: 1}, notes="Agility")
    assert second.ok
    assert character.level == 3
    assert character.history[-1] == LevelUpEntry(
        level=3, selections={content.TRAITS: 1, content.STRESS: 1}, notes="Agility"
    )


def test_failed_commit_leaves_character_untouched():
    character = _character(level=3, history=[LevelUpEntry(level=2), LevelUpEntry(level=3)])
    result = commit_level_up(character, {content.PROFICIENCY: 1})
    assert result.error is LevelUpError.UNKNOWN_OPTION
    assert character.level == 3
    assert len(character.history) == 2


def test_commit_at_max_level_raises():
    with pytest.raises(ValueError):
        commit_level_up(_character(level=10), {})


def test_undo_removes_highest_entry():
    history = [
        LevelUpEntry(level=3, selections={content.TRAITS: 1}),
        LevelUpEntry(level=2, selections={content.STRESS: 1}),
    ]
    character = _character(level=3, history=history)

    removed = undo_last_level_up(character)

    assert removed is not None
    assert removed.level == 3
    assert character.level == 2
    assert [entry.level for entry in character.history] == [2]


def test_undo_then_recommit_sees_fresh_history():
    character = _character(level=5, history=[LevelUpEntry(level=5, selections={MULTICLASS_WIZARD: 1})])
    character.history.insert(0, LevelUpEntry(level=2))
    undo_last_level_up(character)
    assert character.level == 4
    assert commit_level_up(character, {MULTICLASS_BARD: 1}).ok


def test_undo_with_empty_history_is_noop():
    character = _character()
    assert undo_last_level_up(character) is None
    assert character.level == 1


def test_two_multiclass_targets_in_one_selection_are_gated():
    cheap = {
        MULTICLASS_BARD: OptionDefinition(
            MULTICLASS_BARD, cost=1, max_selections=1, family=OptionFamily.multiclass("Bard")
        ),
        MULTICLASS_WIZARD: OptionDefinition(
            MULTICLASS_WIZARD, cost=1, max_selections=1, family=OptionFamily.multiclass("Wizard")
        ),
    }
    result = validate_selection(
        {MULTICLASS_BARD: 1, MULTICLASS_WIZARD: 1}, Tier.TIER_5_7, HistoryFlags(), cheap
    )
    assert result.error is LevelUpError.GATED_CHOICE
    assert result.option_key == MULTICLASS_WIZARD
    assert result.total_cost == 2


def test_select_any_allows_only_one_multiclass_target():
    result = validate_selection(
        {MULTICLASS_BARD: 1, MULTICLASS_WIZARD: 1},
        Tier.TIER_5_7,
        HistoryFlags(),
        options_for_tier(Tier.TIER_5_7),
        select_any=True,
    )
    assert result.error is LevelUpError.OVER_ALLOWANCE
    assert result.option_key == MULTICLASS_WIZARD


def test_picking_one_multiclass_target_gates_the_others():
    availability = option_availability(
        HistoryFlags(), options_for_tier(Tier.TIER_5_7), {MULTICLASS_BARD: 1}
    )
    assert not availability[MULTICLASS_BARD].gated
    assert availability[MULTICLASS_WIZARD].gated
    assert availability[content.SUBCLASS_UPGRADE].gated


def test_undo_follows_removed_entry_level():
    character = _character(level=7, history=[LevelUpEntry(level=2), LevelUpEntry(level=3)])
    undo_last_level_up(character)
    assert character.level == 2


UPPER_CATALOG = options_for_tier(Tier.TIER_5_7)
UPPER_KEYS = sorted(UPPER_CATALOG)
STANDARD_KEYS = sorted(
    key for key, option in UPPER_CATALOG.items() if option.family.kind is OptionFamilyKind.STANDARD
)
MULTICLASS_KEYS = sorted(key for key, option in UPPER_CATALOG.items() if option.family.is_multiclass)

history_flags = st.builds(
    HistoryFlags,
    prior_taken_in_tier=st.dictionaries(
        st.sampled_from(UPPER_KEYS), st.integers(min_value=0, max_value=3), max_size=4
    ),
    had_subclass_upgrade_in_tier=st.booleans(),
    had_multiclass_in_tier=st.booleans(),
    had_multiclass_ever=st.booleans(),
)


@given(
    selections=st.dictionaries(
        st.sampled_from(UPPER_KEYS), st.integers(min_value=0, max_value=3), max_size=5
    ),
    flags=history_flags,
    select_any=st.booleans(),
)
def test_accepted_selections_respect_every_limit(selections, flags, select_any):
    result = validate_selection(
        selections, Tier.TIER_5_7, flags, UPPER_CATALOG, select_any=select_any
    )
    if not result.ok:
        return

    chosen = {key: count for key, count in selections.items() if count > 0}
    for key, count in chosen.items():
        assert flags.taken(key) + count <= UPPER_CATALOG[key].max_selections
    assert sum(chosen.get(key, 0) for key in MULTICLASS_KEYS) <= 1

    if select_any:
        assert result.total_cost == 0
        return
    assert result.total_cost == sum(UPPER_CATALOG[key].cost * count for key, count in chosen.items())
    assert result.total_cost <= points_budget()
    if any(key in MULTICLASS_KEYS for key in chosen):
        assert not flags.had_multiclass_ever
        assert not flags.had_subclass_upgrade_in_tier
        assert content.SUBCLASS_UPGRADE not in chosen
    if content.SUBCLASS_UPGRADE in chosen:
        assert not flags.had_multiclass_in_tier


@given(
    multiclass=st.sampled_from(MULTICLASS_KEYS),
    extras=st.dictionaries(
        st.sampled_from(STANDARD_KEYS), st.integers(min_value=0, max_value=1), max_size=4
    ),
    had_subclass_upgrade_in_tier=st.booleans(),
    had_multiclass_in_tier=st.booleans(),
    had_multiclass_ever=st.booleans(),
)
def test_subclass_upgrade_with_multiclass_is_always_gated(
    multiclass, extras, had_subclass_upgrade_in_tier, had_multiclass_in_tier, had_multiclass_ever
):
    flags = HistoryFlags(
        had_subclass_upgrade_in_tier=had_subclass_upgrade_in_tier,
        had_multiclass_in_tier=had_multiclass_in_tier,
        had_multiclass_ever=had_multiclass_ever,
    )
    selections = {**extras, content.SUBCLASS_UPGRADE: 1, multiclass: 1}

    result = validate_selection(selections, Tier.TIER_5_7, flags, UPPER_CATALOG)

    assert result.error is LevelUpError.GATED_CHOICE
