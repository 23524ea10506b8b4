"""Runtime primitives backing the heartforge HTTP API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict

from heartforge.config import Settings, get_settings
from heartforge.domain import content, leveling
from heartforge.domain import models as dm
from heartforge.domain.enums import LoadoutMode, LoadoutPile
from heartforge.domain.history import tally_history
from heartforge.domain.loadout import LoadoutEditor, ToggleResult, total_recall_cost
from heartforge.domain.rules_config import DEFAULT_RULES, RulesConfig
from heartforge.domain.tiers import (
    automatic_benefits,
    clamp_level,
    loadout_rules_for_tier,
    options_for_tier,
    points_budget,
    tier_changed,
    tier_for_level,
)
from heartforge.repository import JsonCharacterRepository

logger = logging.getLogger(__name__)


class CharacterService:
    """Utilities for loading characters and applying rule decisions to them."""

    def __init__(
        self,
        repository: JsonCharacterRepository,
        *,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self._repository = repository
        self._rules = rules

    # --- persistence ------------------------------------------------------------

    def list_characters(self) -> list[dm.Character]:
        """Return every persisted character ordered by identifier."""

        characters: list[dm.Character] = []
        for character_id in self._repository.list_characters():
            try:
                characters.append(self._repository.load(character_id))
            except FileNotFoundError:
                logger.warning("character %s vanished while listing", int(character_id))
        return characters

    def get_character(self, character_id: dm.CharacterID) -> dm.Character:
        """Load a single character or raise ``FileNotFoundError``."""

        return self._repository.load(character_id)

    def save_character(self, character: dm.Character) -> dm.Character:
        self._repository.save(character)
        return character

    def create_character(
        self,
        name: str,
        class_name: str,
        *,
        class_domains: list[str] | None = None,
    ) -> dm.Character:
        """Create and persist a level 1 character."""

        if class_domains is None:
            try:
                class_domains = content.domains_for_class(class_name)
            except KeyError as exc:
                raise ValueError(f"Unknown class {class_name!r}; pass its domains") from exc

        character = dm.Character(
            id=self._next_identifier(),
            name=name,
            class_name=class_name,
            class_domains=list(class_domains),
            loadout=dm.LoadoutSelection(class_domains=list(class_domains)),
        )
        self._repository.save(character)
        logger.info("created character %s (%s)", int(character.id), class_name)
        return character

    def delete_character(self, character_id: dm.CharacterID) -> None:
        """Remove a character or raise ``FileNotFoundError``."""

        if not self._repository.delete(character_id):
            raise FileNotFoundError(self._repository.path_for(character_id))
        logger.info("deleted character %s", int(character_id))

    def _next_identifier(self) -> dm.CharacterID:
        existing = self._repository.list_characters()
        if not existing:
            return dm.CharacterID(1)
        return dm.CharacterID(int(max(existing, key=int)) + 1)

    # --- levelling --------------------------------------------------------------

    def preview_level_up(
        self,
        character_id: dm.CharacterID,
        selections: Mapping[str, int],
        *,
        select_any: bool = False,
    ) -> dict[str, object]:
        """Score a candidate selection for the character's next level.

        Raises ``ValueError`` for a character already at the level cap.
        """

        character = self.get_character(character_id)
        target_level = leveling.next_level(character, rules=self._rules)
        tier = tier_for_level(target_level)
        flags = tally_history(character.history, target_level, tier)
        catalog = options_for_tier(tier)
        result = leveling.validate_selection(
            selections, tier, flags, catalog, select_any=select_any, rules=self._rules
        )
        availability = leveling.option_availability(flags, catalog, selections)
        return {
            "target_level": target_level,
            "tier": str(tier),
            "budget": points_budget(self._rules),
            "automatic_benefits": [
                str(benefit)
                for benefit in automatic_benefits(
                    target_level, tier_changed(character.level, target_level), rules=self._rules
                )
            ],
            "result": self.to_result_dict(result),
            "options": [asdict(option) for option in availability.values()],
        }

    def commit_level_up(
        self,
        character_id: dm.CharacterID,
        selections: Mapping[str, int],
        *,
        notes: str | None = None,
        select_any: bool = False,
    ) -> tuple[dm.Character, leveling.ValidationResult]:
        """Validate and, on success, append a level-up entry to the character."""

        character = self.get_character(character_id)
        result = leveling.commit_level_up(
            character, selections, notes=notes, select_any=select_any, rules=self._rules
        )
        if result.ok:
            self.save_character(character)
            logger.info(
                "character %s reached level %s (cost %s, select_any=%s)",
                int(character.id),
                character.level,
                result.total_cost,
                select_any,
            )
        return character, result

    def undo_level_up(
        self, character_id: dm.CharacterID
    ) -> tuple[dm.Character, dm.LevelUpEntry | None]:
        character = self.get_character(character_id)
        entry = leveling.undo_last_level_up(character)
        if entry is not None:
            self.save_character(character)
            logger.info("character %s undid level %s", int(character.id), entry.level)
        return character, entry

    # --- loadout ----------------------------------------------------------------

    def loadout_editor(self, character: dm.Character) -> LoadoutEditor:
        return LoadoutEditor(character.loadout, tier_for_level(character.level), rules=self._rules)

    def available_cards(
        self, character_id: dm.CharacterID, *, domains: list[str] | None = None
    ) -> list[dm.DomainCardLite]:
        character = self.get_character(character_id)
        editor = self.loadout_editor(character)
        if domains is not None:
            editor.selected_domains = list(domains)
        return editor.available_cards()

    def set_loadout_mode(self, character_id: dm.CharacterID, mode: LoadoutMode) -> dm.Character:
        character = self.get_character(character_id)
        self.loadout_editor(character).set_mode(mode)
        return self.save_character(character)

    def toggle_card(
        self, character_id: dm.CharacterID, card_name: str, pile: LoadoutPile
    ) -> tuple[dm.Character, ToggleResult]:
        """Toggle a card by name in the active or vault pile."""

        character = self.get_character(character_id)
        card = self._find_card(character, card_name)
        editor = self.loadout_editor(character)
        if pile == LoadoutPile.ACTIVE:
            result = editor.toggle_active(card)
        else:
            result = editor.toggle_vault(card)
        if result.changed:
            self.save_character(character)
        return character, result

    def add_homebrew_card(
        self,
        character_id: dm.CharacterID,
        card: dm.DomainCardLite,
        *,
        pile: LoadoutPile | None = None,
    ) -> tuple[dm.Character, ToggleResult | None]:
        character = self.get_character(character_id)
        if self._lookup_card(character, card.name) is not None:
            raise ValueError(f"Card {card.name!r} already exists")
        editor = self.loadout_editor(character)
        homebrew = editor.add_homebrew(card)
        result = None
        if pile == LoadoutPile.ACTIVE:
            result = editor.add_homebrew_to_active(homebrew)
        elif pile == LoadoutPile.VAULT:
            result = editor.add_homebrew_to_vault(homebrew)
        self.save_character(character)
        return character, result

    @staticmethod
    def _lookup_card(character: dm.Character, card_name: str) -> dm.DomainCardLite | None:
        loadout = character.loadout
        pools = (loadout.active_cards, loadout.vault_cards, loadout.homebrew_cards)
        for pool in (*pools, content.STANDARD_CARDS):
            for card in pool:
                if card.name == card_name:
                    return card
        return None

    def _find_card(self, character: dm.Character, card_name: str) -> dm.DomainCardLite:
        card = self._lookup_card(character, card_name)
        if card is None:
            raise ValueError(f"Card {card_name!r} not found")
        return card

    # --- serialisation ----------------------------------------------------------

    @staticmethod
    def to_result_dict(result: leveling.ValidationResult) -> dict[str, object]:
        return {
            "ok": result.ok,
            "total_cost": result.total_cost,
            "error": str(result.error) if result.error is not None else None,
            "option_key": result.option_key,
        }

    @staticmethod
    def to_summary_dict(character: dm.Character) -> dict[str, object]:
        """Return a JSON-friendly overview of a character."""

        return {
            "id": int(character.id),
            "name": character.name,
            "class_name": character.class_name,
            "class_domains": list(character.class_domains),
            "level": character.level,
            "tier": str(tier_for_level(character.level)),
        }

    @staticmethod
    def to_loadout_dict(character: dm.Character, rules: RulesConfig = DEFAULT_RULES) -> dict[str, object]:
        loadout = character.loadout
        tier_rules = loadout_rules_for_tier(tier_for_level(character.level), rules)
        return {
            "mode": str(loadout.mode),
            "active_cards": [asdict(card) for card in loadout.active_cards],
            "vault_cards": [asdict(card) for card in loadout.vault_cards],
            "homebrew_cards": [asdict(card) for card in loadout.homebrew_cards],
            "class_domains": list(loadout.class_domains),
            "expanded_domain_access": loadout.expanded_domain_access,
            "creation_complete": loadout.creation_complete,
            "max_active_cards": tier_rules.max_active_cards,
            "max_vault_cards": tier_rules.max_vault_cards,
            "max_card_level": tier_rules.max_card_level,
            "active_recall_cost": total_recall_cost(loadout.active_cards),
        }

    @staticmethod
    def to_detail_dict(character: dm.Character, rules: RulesConfig = DEFAULT_RULES) -> dict[str, object]:
        summary = CharacterService.to_summary_dict(character)
        summary.update(
            {
                "history": [
                    {"level": entry.level, "notes": entry.notes, "selections": dict(entry.selections)}
                    for entry in character.history
                ],
                "loadout": CharacterService.to_loadout_dict(character, rules),
            }
        )
        return summary

    @staticmethod
    def tier_overview(level: int, rules: RulesConfig = DEFAULT_RULES) -> dict[str, object]:
        """Describe the tier a level falls in: budget, loadout limits and catalog."""

        tier = tier_for_level(level)
        tier_rules = loadout_rules_for_tier(tier, rules)
        return {
            "level": clamp_level(level, rules=rules),
            "tier": str(tier),
            "budget": points_budget(rules),
            "max_active_cards": tier_rules.max_active_cards,
            "max_vault_cards": tier_rules.max_vault_cards,
            "max_card_level": tier_rules.max_card_level,
            "options": [
                {
                    "key": option.key,
                    "cost": option.cost,
                    "max_selections": option.max_selections,
                    "family": str(option.family.kind),
                }
                for option in options_for_tier(tier).values()
            ],
        }


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self, *, settings: Settings | None = None, rules: RulesConfig = DEFAULT_RULES
    ) -> None:
        self.settings = settings or get_settings()
        self.repository = JsonCharacterRepository(self.settings.data_dir)
        self.rules = rules
        self.characters = CharacterService(self.repository, rules=rules)

    async def shutdown(self) -> None:
        logger.info("heartforge API state shutting down")


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
