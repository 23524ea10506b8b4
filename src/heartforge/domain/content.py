"""Static SRD content: advancement catalogs, domains and domain cards.

This is data, not logic.  Homebrew content is layered on top at runtime
through the loadout selection.
"""

from __future__ import annotations

from .enums import Tier
from .models import Catalog, DomainCardLite, OptionDefinition, OptionFamily

# --- Classes and domains --------------------------------------------------------

ALL_DOMAINS: tuple[str, ...] = (
    "Arcana",
    "Blade",
    "Bone",
    "Codex",
    "Grace",
    "Midnight",
    "Sage",
    "Splendor",
    "Valor",
)

CLASS_DOMAINS: dict[str, tuple[str, str]] = {
    "Bard": ("Grace", "Codex"),
    "Druid": ("Sage", "Arcana"),
    "Guardian": ("Valor", "Blade"),
    "Ranger": ("Bone", "Sage"),
    "Rogue": ("Midnight", "Grace"),
    "Seraph": ("Splendor", "Valor"),
    "Sorcerer": ("Arcana", "Midnight"),
    "Warrior": ("Blade", "Bone"),
    "Wizard": ("Codex", "Splendor"),
}


def domains_for_class(class_name: str) -> list[str]:
    """Return the two domains granted by a class, or raise ``KeyError``."""

    return list(CLASS_DOMAINS[class_name])


# --- Advancement options --------------------------------------------------------

TRAITS = "Gain a +1 bonus to two unmarked character traits and mark them"
HIT_POINT = "Permanently gain one Hit Point slot"
STRESS = "Permanently gain one Stress slot"
EXPERIENCES = "Permanently gain a +1 bonus to two Experiences"
DOMAIN_CARD = "Choose an additional domain card of your level or lower"
EVASION = "Permanently gain a +1 bonus to your Evasion"
SUBCLASS_UPGRADE = "Take an upgraded subclass card"
PROFICIENCY = "Increase your Proficiency by +1"


def multiclass_key(class_name: str) -> str:
    return f"Multiclass: {class_name}"


def _base_options() -> list[OptionDefinition]:
    return [
        OptionDefinition(TRAITS, cost=1, max_selections=3),
        OptionDefinition(HIT_POINT, cost=1, max_selections=2),
        OptionDefinition(STRESS, cost=1, max_selections=2),
        OptionDefinition(EXPERIENCES, cost=1, max_selections=1),
        OptionDefinition(DOMAIN_CARD, cost=1, max_selections=1),
        OptionDefinition(EVASION, cost=1, max_selections=1),
    ]


def _upper_tier_options() -> list[OptionDefinition]:
    options = [
        OptionDefinition(
            SUBCLASS_UPGRADE,
            cost=1,
            max_selections=1,
            family=OptionFamily.subclass_upgrade(),
        ),
        OptionDefinition(PROFICIENCY, cost=2, max_selections=1),
    ]
    options.extend(
        OptionDefinition(
            multiclass_key(class_name),
            cost=2,
            max_selections=1,
            family=OptionFamily.multiclass(class_name),
        )
        for class_name in CLASS_DOMAINS
    )
    return options


def _catalog(options: list[OptionDefinition]) -> Catalog:
    catalog: Catalog = {}
    for option in options:
        if option.key in catalog:
            raise ValueError(f"duplicate option key {option.key!r}")
        catalog[option.key] = option
    return catalog


OPTION_CATALOGS: dict[Tier, Catalog] = {
    Tier.TIER_1: {},
    Tier.TIER_2_4: _catalog(_base_options()),
    Tier.TIER_5_7: _catalog(_base_options() + _upper_tier_options()),
    Tier.TIER_8_10: _catalog(_base_options() + _upper_tier_options()),
}


# --- Domain cards ---------------------------------------------------------------


def _card(name: str, domain: str, level: int, card_type: str, recall: int) -> DomainCardLite:
    return DomainCardLite(
        name=name, domain=domain, level=level, type=card_type, recall_cost=recall
    )


STANDARD_CARDS: tuple[DomainCardLite, ...] = (
    _card("Rune Ward", "Arcana", 1, "Spell", 0),
    _card("Unleash Chaos", "Arcana", 1, "Spell", 1),
    _card("Wall Walk", "Arcana", 1, "Spell", 1),
    _card("Cinder Grasp", "Arcana", 2, "Spell", 1),
    _card("Counterspell", "Arcana", 3, "Spell", 2),
    _card("Chain Lightning", "Arcana", 5, "Spell", 1),
    _card("Arcane Reflection", "Arcana", 8, "Spell", 1),
    _card("Get Back Up", "Blade", 1, "Ability", 1),
    _card("Not Good Enough", "Blade", 1, "Ability", 1),
    _card("Whirlwind", "Blade", 1, "Ability", 0),
    _card("Reckless", "Blade", 2, "Ability", 1),
    _card("Fortified Armor", "Blade", 4, "Ability", 0),
    _card("Champion's Edge", "Blade", 5, "Ability", 1),
    _card("Battle Monster", "Blade", 10, "Ability", 0),
    _card("Deft Maneuvers", "Bone", 1, "Ability", 0),
    _card("I See It Coming", "Bone", 1, "Ability", 1),
    _card("Untouchable", "Bone", 1, "Ability", 1),
    _card("Ferocity", "Bone", 2, "Ability", 2),
    _card("Tactician", "Bone", 3, "Ability", 1),
    _card("Signature Move", "Bone", 5, "Ability", 1),
    _card("Deathrun", "Bone", 10, "Ability", 1),
    _card("Book of Ava", "Codex", 1, "Grimoire", 2),
    _card("Book of Illiat", "Codex", 1, "Grimoire", 2),
    _card("Book of Tyfar", "Codex", 1, "Grimoire", 2),
    _card("Book of Sitil", "Codex", 2, "Grimoire", 2),
    _card("Book of Korvax", "Codex", 3, "Grimoire", 2),
    _card("Book of Grynn", "Codex", 6, "Grimoire", 2),
    _card("Book of Unending", "Codex", 9, "Grimoire", 3),
    _card("Deft Deceiver", "Grace", 1, "Ability", 0),
    _card("Enrapture", "Grace", 1, "Spell", 0),
    _card("Inspirational Words", "Grace", 1, "Ability", 1),
    _card("Tell No Lies", "Grace", 2, "Spell", 1),
    _card("Words of Discord", "Grace", 5, "Spell", 1),
    _card("Master of the Craft", "Grace", 7, "Ability", 0),
    _card("Invisibility", "Grace", 10, "Spell", 0),
    _card("Pick and Pull", "Midnight", 1, "Ability", 0),
    _card("Rain of Blades", "Midnight", 1, "Spell", 1),
    _card("Uncanny Disguise", "Midnight", 1, "Spell", 0),
    _card("Midnight Spirit", "Midnight", 2, "Spell", 1),
    _card("Shadowbind", "Midnight", 2, "Spell", 0),
    _card("Glyph of Nightfall", "Midnight", 5, "Spell", 1),
    _card("Eclipse", "Midnight", 9, "Spell", 2),
    _card("Gifted Tracker", "Sage", 1, "Ability", 0),
    _card("Nature's Tongue", "Sage", 1, "Ability", 0),
    _card("Vicious Entangle", "Sage", 1, "Spell", 1),
    _card("Conjure Swarm", "Sage", 2, "Spell", 1),
    _card("Corrosive Projectile", "Sage", 3, "Spell", 1),
    _card("Wild Fortress", "Sage", 6, "Spell", 1),
    _card("Tempest", "Sage", 10, "Spell", 2),
    _card("Bolt Beacon", "Splendor", 1, "Spell", 1),
    _card("Mending Touch", "Splendor", 1, "Spell", 1),
    _card("Reassurance", "Splendor", 1, "Ability", 0),
    _card("Final Words", "Splendor", 2, "Spell", 1),
    _card("Healing Hands", "Splendor", 2, "Spell", 1),
    _card("Restoration", "Splendor", 6, "Spell", 2),
    _card("Resurrection", "Splendor", 10, "Spell", 2),
    _card("Bare Bones", "Valor", 1, "Ability", 0),
    _card("Forceful Push", "Valor", 1, "Ability", 0),
    _card("I Am Your Shield", "Valor", 1, "Ability", 1),
    _card("Body Basher", "Valor", 2, "Ability", 1),
    _card("Bold Presence", "Valor", 2, "Ability", 0),
    _card("Rise Up", "Valor", 5, "Ability", 2),
    _card("Unyielding Armor", "Valor", 10, "Ability", 1),
)
