"""Dataclasses describing advancement options, level-up history and loadouts.

The rules layer operates only on these in-memory types.  Persistence and
HTTP adapters translate between them and their own representations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from .enums import LoadoutMode, OptionFamilyKind

CharacterID = NewType("CharacterID", int)

MULTICLASS_PREFIX = "Multiclass"
SUBCLASS_UPGRADE_PREFIX = "Take an upgraded subclass card"


# --- Advancement options --------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OptionFamily:
    """Gating family of an advancement option."""

    kind: OptionFamilyKind = OptionFamilyKind.STANDARD
    target_class: str | None = None

    @classmethod
    def standard(cls) -> OptionFamily:
        return cls(OptionFamilyKind.STANDARD)

    @classmethod
    def subclass_upgrade(cls) -> OptionFamily:
        return cls(OptionFamilyKind.SUBCLASS_UPGRADE)

    @classmethod
    def multiclass(cls, target_class: str | None = None) -> OptionFamily:
        return cls(OptionFamilyKind.MULTICLASS, target_class)

    @classmethod
    def from_key(cls, key: str) -> OptionFamily:
        """Classify a display key using the published naming convention.

        ``"Multiclass: Rogue"`` becomes a multiclass option targeting Rogue;
        keys starting with ``"Take an upgraded subclass card"`` are subclass
        upgrades; everything else is standard.
        """

        text = key.strip()
        if text.startswith(MULTICLASS_PREFIX):
            _, sep, rest = text.partition(":")
            target = rest.strip() if sep else ""
            return cls.multiclass(target or None)
        if text.startswith(SUBCLASS_UPGRADE_PREFIX):
            return cls.subclass_upgrade()
        return cls.standard()

    @property
    def is_multiclass(self) -> bool:
        return self.kind is OptionFamilyKind.MULTICLASS

    @property
    def is_subclass_upgrade(self) -> bool:
        return self.kind is OptionFamilyKind.SUBCLASS_UPGRADE


@dataclass(frozen=True, slots=True)
class OptionDefinition:
    """Catalog entry for a costed advancement choice."""

    key: str
    cost: int
    max_selections: int
    family: OptionFamily = field(default_factory=OptionFamily.standard)

    def __post_init__(self) -> None:
        if self.cost <= 0:
            raise ValueError(f"option {self.key!r} must cost at least one point")
        if self.max_selections <= 0:
            raise ValueError(f"option {self.key!r} must allow at least one selection")


Catalog = dict[str, OptionDefinition]


@dataclass(slots=True)
class LevelUpEntry:
    """One committed advancement event."""

    level: int
    selections: dict[str, int] = field(default_factory=dict)
    notes: str | None = None


@dataclass(slots=True)
class HistoryFlags:
    """Per-target-level facts derived from a character's level-up history."""

    prior_taken_in_tier: dict[str, int] = field(default_factory=dict)
    had_subclass_upgrade_in_tier: bool = False
    had_multiclass_in_tier: bool = False
    had_multiclass_ever: bool = False

    def taken(self, key: str) -> int:
        return self.prior_taken_in_tier.get(key, 0)


# --- Loadout --------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DomainCardLite:
    """Storage-friendly view of a domain card."""

    name: str
    domain: str
    level: int
    type: str = "Ability"
    description: str = ""
    hope_cost: int | None = None
    recall_cost: int | None = None
    is_homebrew: bool = False

    @property
    def effective_recall_cost(self) -> int:
        if self.recall_cost is not None:
            return self.recall_cost
        return self.hope_cost or 0


@dataclass(slots=True)
class LoadoutSelection:
    """A character's active and vault cards plus domain access settings."""

    mode: LoadoutMode = LoadoutMode.CLASS_DOMAINS
    active_cards: list[DomainCardLite] = field(default_factory=list)
    vault_cards: list[DomainCardLite] = field(default_factory=list)
    homebrew_cards: list[DomainCardLite] = field(default_factory=list)
    class_domains: list[str] = field(default_factory=list)
    expanded_domain_access: bool = False
    creation_complete: bool = False

    def active_names(self) -> set[str]:
        return {card.name for card in self.active_cards}

    def vault_names(self) -> set[str]:
        return {card.name for card in self.vault_cards}


# --- Character aggregate --------------------------------------------------------


@dataclass(slots=True)
class Character:
    """Character record as persisted by the storage adapter."""

    id: CharacterID
    name: str
    class_name: str
    class_domains: list[str] = field(default_factory=list)
    level: int = 1
    history: list[LevelUpEntry] = field(default_factory=list)
    loadout: LoadoutSelection = field(default_factory=LoadoutSelection)
