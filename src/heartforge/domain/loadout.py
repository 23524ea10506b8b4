"""Loadout rules: domain access, card pools and active/vault capacity.

Cards are identified by name.  A card lives in at most one pile: adding it
to the active loadout takes it out of the vault and vice versa.  Edits never
touch the position or pile of any other card.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from .content import ALL_DOMAINS, STANDARD_CARDS
from .enums import LoadoutMode, LoadoutOutcome, LoadoutPile, Tier
from .models import DomainCardLite, LoadoutSelection
from .rules_config import DEFAULT_RULES, LoadoutRules, RulesConfig
from .tiers import loadout_rules_for_tier

_CHANGED = frozenset(
    {LoadoutOutcome.ADDED, LoadoutOutcome.REMOVED, LoadoutOutcome.MOVED, LoadoutOutcome.SWAPPED}
)


@dataclass(slots=True)
class ToggleResult:
    """Outcome of a single loadout edit."""

    outcome: LoadoutOutcome
    card_name: str

    @property
    def changed(self) -> bool:
        return self.outcome in _CHANGED


# --- Domain access --------------------------------------------------------------


def domains_for_mode(mode: LoadoutMode, class_domains: Sequence[str]) -> list[str]:
    if mode == LoadoutMode.CLASS_DOMAINS:
        return list(class_domains)
    return list(ALL_DOMAINS)


def set_mode(selection: LoadoutSelection, mode: LoadoutMode) -> list[str]:
    """Switch domain access and return the reset selectable-domain filter."""

    selection.mode = LoadoutMode(mode)
    selection.expanded_domain_access = selection.mode == LoadoutMode.ALL_DOMAINS
    return domains_for_mode(selection.mode, selection.class_domains)


def available_cards(
    mode: LoadoutMode,
    class_domains: Sequence[str],
    max_card_level: int,
    selected_domains: Iterable[str],
    homebrew_cards: Iterable[DomainCardLite],
    *,
    standard_cards: Iterable[DomainCardLite] = STANDARD_CARDS,
) -> list[DomainCardLite]:
    """Cards a character could pick right now, ordered by level.

    Standard cards are limited to the mode's domains and the tier's level
    ceiling; homebrew cards are always offered.  Both are narrowed to
    ``selected_domains``.  The sort is stable, so equal levels keep catalog
    order with standard content ahead of homebrew.
    """

    accessible = set(domains_for_mode(mode, class_domains))
    wanted = set(selected_domains)
    standard = [
        card
        for card in standard_cards
        if card.domain in accessible and card.level <= max_card_level
    ]
    pool = [card for card in [*standard, *homebrew_cards] if card.domain in wanted]
    return sorted(pool, key=lambda card: card.level)


def card_eligibility(
    card: DomainCardLite, selection: LoadoutSelection, rules: LoadoutRules
) -> LoadoutOutcome | None:
    """Return the reason ``card`` may not be added, or ``None`` when it may."""

    if card.is_homebrew:
        return None
    if card.domain not in domains_for_mode(selection.mode, selection.class_domains):
        return LoadoutOutcome.DOMAIN_NOT_ELIGIBLE
    if card.level > rules.max_card_level:
        return LoadoutOutcome.LEVEL_TOO_HIGH
    return None


def is_card_allowed_in_loadout(
    card: DomainCardLite,
    rules: LoadoutRules,
    class_domains: Sequence[str],
    expanded_access: bool,
) -> bool:
    if card.level > rules.max_card_level:
        return False
    if rules.max_recall_cost is not None and card.effective_recall_cost > rules.max_recall_cost:
        return False
    if not expanded_access and class_domains and card.domain not in class_domains:
        return False
    return True


def total_recall_cost(cards: Iterable[DomainCardLite]) -> int:
    return sum(card.effective_recall_cost for card in cards)


# --- Capacity helpers -----------------------------------------------------------


def is_active_full(selection: LoadoutSelection, rules: LoadoutRules) -> bool:
    return len(selection.active_cards) >= rules.max_active_cards


def is_vault_full(selection: LoadoutSelection, rules: LoadoutRules) -> bool:
    return rules.max_vault_cards is not None and len(selection.vault_cards) >= rules.max_vault_cards


def _without(cards: list[DomainCardLite], name: str) -> list[DomainCardLite]:
    return [card for card in cards if card.name != name]


def _find(cards: Iterable[DomainCardLite], name: str) -> DomainCardLite | None:
    return next((card for card in cards if card.name == name), None)


# --- Toggles --------------------------------------------------------------------


def toggle_active(
    selection: LoadoutSelection, card: DomainCardLite, rules: LoadoutRules
) -> ToggleResult:
    """Remove ``card`` from the active loadout, or add it when allowed."""

    if card.name in selection.active_names():
        selection.active_cards = _without(selection.active_cards, card.name)
        return ToggleResult(LoadoutOutcome.REMOVED, card.name)

    refusal = card_eligibility(card, selection, rules)
    if refusal is not None:
        return ToggleResult(refusal, card.name)
    if is_active_full(selection, rules):
        return ToggleResult(LoadoutOutcome.ACTIVE_FULL, card.name)

    selection.active_cards = [*selection.active_cards, card]
    selection.vault_cards = _without(selection.vault_cards, card.name)
    return ToggleResult(LoadoutOutcome.ADDED, card.name)


def toggle_vault(
    selection: LoadoutSelection, card: DomainCardLite, rules: LoadoutRules
) -> ToggleResult:
    """Remove ``card`` from the vault, or add it when allowed."""

    if card.name in selection.vault_names():
        selection.vault_cards = _without(selection.vault_cards, card.name)
        return ToggleResult(LoadoutOutcome.REMOVED, card.name)

    refusal = card_eligibility(card, selection, rules)
    if refusal is not None:
        return ToggleResult(refusal, card.name)
    if is_vault_full(selection, rules):
        return ToggleResult(LoadoutOutcome.VAULT_FULL, card.name)

    selection.vault_cards = [*selection.vault_cards, card]
    selection.active_cards = _without(selection.active_cards, card.name)
    return ToggleResult(LoadoutOutcome.ADDED, card.name)


def toggle(
    selection: LoadoutSelection, card: DomainCardLite, pile: LoadoutPile, rules: LoadoutRules
) -> ToggleResult:
    if pile == LoadoutPile.ACTIVE:
        return toggle_active(selection, card, rules)
    return toggle_vault(selection, card, rules)


# --- Moves between piles --------------------------------------------------------


def remove_active(selection: LoadoutSelection, card_name: str) -> ToggleResult:
    if _find(selection.active_cards, card_name) is None:
        return ToggleResult(LoadoutOutcome.NOT_FOUND, card_name)
    selection.active_cards = _without(selection.active_cards, card_name)
    return ToggleResult(LoadoutOutcome.REMOVED, card_name)


def remove_vault(selection: LoadoutSelection, card_name: str) -> ToggleResult:
    if _find(selection.vault_cards, card_name) is None:
        return ToggleResult(LoadoutOutcome.NOT_FOUND, card_name)
    selection.vault_cards = _without(selection.vault_cards, card_name)
    return ToggleResult(LoadoutOutcome.REMOVED, card_name)


def move_to_vault(
    selection: LoadoutSelection, card_name: str, rules: LoadoutRules
) -> ToggleResult:
    card = _find(selection.active_cards, card_name)
    if card is None:
        return ToggleResult(LoadoutOutcome.NOT_FOUND, card_name)
    if is_vault_full(selection, rules):
        return ToggleResult(LoadoutOutcome.VAULT_FULL, card_name)
    selection.active_cards = _without(selection.active_cards, card_name)
    selection.vault_cards = [*selection.vault_cards, card]
    return ToggleResult(LoadoutOutcome.MOVED, card_name)


def move_to_active(
    selection: LoadoutSelection, card_name: str, rules: LoadoutRules
) -> ToggleResult:
    card = _find(selection.vault_cards, card_name)
    if card is None:
        return ToggleResult(LoadoutOutcome.NOT_FOUND, card_name)
    if is_active_full(selection, rules):
        return ToggleResult(LoadoutOutcome.ACTIVE_FULL, card_name)
    selection.vault_cards = _without(selection.vault_cards, card_name)
    selection.active_cards = [*selection.active_cards, card]
    return ToggleResult(LoadoutOutcome.MOVED, card_name)


def swap_cards(
    selection: LoadoutSelection, active_name: str, vault_name: str
) -> ToggleResult:
    """Exchange an active card with a vault card, each taking the other's slot."""

    active_card = _find(selection.active_cards, active_name)
    vault_card = _find(selection.vault_cards, vault_name)
    if active_card is None:
        return ToggleResult(LoadoutOutcome.NOT_FOUND, active_name)
    if vault_card is None:
        return ToggleResult(LoadoutOutcome.NOT_FOUND, vault_name)
    selection.active_cards = [
        vault_card if card.name == active_name else card for card in selection.active_cards
    ]
    selection.vault_cards = [
        active_card if card.name == vault_name else card for card in selection.vault_cards
    ]
    return ToggleResult(LoadoutOutcome.SWAPPED, active_name)


# --- Homebrew -------------------------------------------------------------------


def as_homebrew(card: DomainCardLite) -> DomainCardLite:
    return card if card.is_homebrew else replace(card, is_homebrew=True)


def add_homebrew(selection: LoadoutSelection, card: DomainCardLite) -> DomainCardLite:
    """Register a homebrew card with the selection's pool."""

    homebrew = as_homebrew(card)
    selection.homebrew_cards = [*selection.homebrew_cards, homebrew]
    return homebrew


def add_homebrew_to_active(
    selection: LoadoutSelection, card: DomainCardLite, rules: LoadoutRules
) -> ToggleResult:
    homebrew = as_homebrew(card)
    if homebrew.name in selection.active_names():
        return ToggleResult(LoadoutOutcome.ADDED, homebrew.name)
    if is_active_full(selection, rules):
        return ToggleResult(LoadoutOutcome.ACTIVE_FULL, homebrew.name)
    selection.active_cards = [*selection.active_cards, homebrew]
    selection.vault_cards = _without(selection.vault_cards, homebrew.name)
    return ToggleResult(LoadoutOutcome.ADDED, homebrew.name)


def add_homebrew_to_vault(
    selection: LoadoutSelection, card: DomainCardLite, rules: LoadoutRules
) -> ToggleResult:
    homebrew = as_homebrew(card)
    if homebrew.name in selection.vault_names():
        return ToggleResult(LoadoutOutcome.ADDED, homebrew.name)
    if is_vault_full(selection, rules):
        return ToggleResult(LoadoutOutcome.VAULT_FULL, homebrew.name)
    selection.vault_cards = [*selection.vault_cards, homebrew]
    selection.active_cards = _without(selection.active_cards, homebrew.name)
    return ToggleResult(LoadoutOutcome.ADDED, homebrew.name)


# --- Editing session ------------------------------------------------------------


class LoadoutEditor:
    """Loadout editing session for one character at one tier.

    Owns the selection being edited, the session's rules (the active-card
    limit can be adjusted for homebrew or class features) and the
    selectable-domain filter used by :meth:`available_cards`.
    """

    def __init__(
        self,
        selection: LoadoutSelection,
        tier: Tier,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        standard_cards: Sequence[DomainCardLite] = STANDARD_CARDS,
    ) -> None:
        self.selection = selection
        self.rules = loadout_rules_for_tier(tier, rules)
        self._standard_cards = standard_cards
        self.selected_domains = domains_for_mode(selection.mode, selection.class_domains)

    @property
    def domains_to_show(self) -> list[str]:
        return domains_for_mode(self.selection.mode, self.selection.class_domains)

    @property
    def is_active_full(self) -> bool:
        return is_active_full(self.selection, self.rules)

    @property
    def is_vault_full(self) -> bool:
        return is_vault_full(self.selection, self.rules)

    def set_mode(self, mode: LoadoutMode) -> None:
        self.selected_domains = set_mode(self.selection, mode)

    def toggle_domain(self, domain: str) -> None:
        if domain in self.selected_domains:
            self.selected_domains = [d for d in self.selected_domains if d != domain]
        else:
            self.selected_domains = [*self.selected_domains, domain]

    def select_all_domains(self) -> None:
        self.selected_domains = self.domains_to_show

    def clear_domains(self) -> None:
        self.selected_domains = []

    def available_cards(self) -> list[DomainCardLite]:
        return available_cards(
            self.selection.mode,
            self.selection.class_domains,
            self.rules.max_card_level,
            self.selected_domains,
            self.selection.homebrew_cards,
            standard_cards=self._standard_cards,
        )

    def toggle_active(self, card: DomainCardLite) -> ToggleResult:
        return toggle_active(self.selection, card, self.rules)

    def toggle_vault(self, card: DomainCardLite) -> ToggleResult:
        return toggle_vault(self.selection, card, self.rules)

    def move_to_vault(self, card_name: str) -> ToggleResult:
        return move_to_vault(self.selection, card_name, self.rules)

    def move_to_active(self, card_name: str) -> ToggleResult:
        return move_to_active(self.selection, card_name, self.rules)

    def swap_cards(self, active_name: str, vault_name: str) -> ToggleResult:
        return swap_cards(self.selection, active_name, vault_name)

    def add_homebrew(self, card: DomainCardLite) -> DomainCardLite:
        return add_homebrew(self.selection, card)

    def add_homebrew_to_active(self, card: DomainCardLite) -> ToggleResult:
        return add_homebrew_to_active(self.selection, card, self.rules)

    def add_homebrew_to_vault(self, card: DomainCardLite) -> ToggleResult:
        return add_homebrew_to_vault(self.selection, card, self.rules)

    def change_max_active_cards(self, delta: int) -> bool:
        """Adjust the active-card limit; refuses to go below 1 or the current count."""

        proposed = self.rules.max_active_cards + delta
        if proposed < 1 or proposed < len(self.selection.active_cards):
            return False
        self.rules = replace(self.rules, max_active_cards=proposed)
        return True

    def complete(self) -> LoadoutSelection:
        self.selection.creation_complete = True
        return self.selection
