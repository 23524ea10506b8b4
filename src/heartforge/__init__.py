"""Character advancement and loadout rules for Daggerheart."""
