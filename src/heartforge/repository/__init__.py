"""Storage adapters for heartforge characters."""

from heartforge.repository.json_store import JsonCharacterRepository

__all__ = ["JsonCharacterRepository"]
