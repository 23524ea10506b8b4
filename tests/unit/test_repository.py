"""Tests for the JSON character repository."""

from __future__ import annotations

import pytest

from heartforge.domain import content
from heartforge.domain import models as dm
from heartforge.domain.enums import LoadoutMode
from heartforge.repository import JsonCharacterRepository, json_store


def _character(character_id: int = 1) -> dm.Character:
    loadout = dm.LoadoutSelection(
        mode=LoadoutMode.ALL_DOMAINS,
        active_cards=[content.STANDARD_CARDS[0]],
        vault_cards=[dm.DomainCardLite(name="Starfall", domain="Dread", level=3, is_homebrew=True)],
        class_domains=["Arcana", "Midnight"],
        expanded_domain_access=True,
    )
    return dm.Character(
        id=dm.CharacterID(character_id),
        name="Marlowe",
        class_name="Sorcerer",
        class_domains=["Arcana", "Midnight"],
        level=3,
        history=[
            dm.LevelUpEntry(level=2, selections={content.TRAITS: 1, content.STRESS: 1}),
            dm.LevelUpEntry(level=3, selections={content.EVASION: 1}, notes="Dodgy"),
        ],
        loadout=loadout,
    )


def test_save_and_load_character(tmp_path):
    repo = JsonCharacterRepository(tmp_path)
    character = _character()

    path = repo.save(character)
    assert path.exists()

    loaded = repo.load(dm.CharacterID(1))
    assert loaded == character
    assert loaded.loadout.mode is LoadoutMode.ALL_DOMAINS


def test_list_and_delete(tmp_path):
    repo = JsonCharacterRepository(tmp_path)
    repo.save(_character(2))
    repo.save(_character(10))

    assert repo.list_characters() == [dm.CharacterID(2), dm.CharacterID(10)]

    assert repo.delete(dm.CharacterID(2)) is True
    assert repo.delete(dm.CharacterID(2)) is False
    assert repo.list_characters() == [dm.CharacterID(10)]


def test_load_missing_character_raises(tmp_path):
    repo = JsonCharacterRepository(tmp_path)
    with pytest.raises(FileNotFoundError):
        repo.load(dm.CharacterID(99))


def test_interrupted_save_keeps_previous_snapshot(tmp_path, monkeypatch):
    repo = JsonCharacterRepository(tmp_path)
    character = _character()
    repo.save(character)

    def crash(src, dst):
        raise OSError("disk went away")

    monkeypatch.setattr(json_store.os, "replace", crash)
    character.level = 4
    character.history.append(dm.LevelUpEntry(level=4, selections={content.TRAITS: 1}))
    with pytest.raises(OSError):
        repo.save(character)

    stored = repo.load(dm.CharacterID(1))
    assert stored.level == 3
    assert len(stored.history) == 2
    assert (tmp_path / "character_1.tmp").exists()
    assert repo.list_characters() == [dm.CharacterID(1)]


def test_save_leaves_no_temp_file(tmp_path):
    repo = JsonCharacterRepository(tmp_path)
    path = repo.save(_character())
    assert sorted(p.name for p in tmp_path.iterdir()) == [path.name]
