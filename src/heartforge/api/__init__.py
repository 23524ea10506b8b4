"""HTTP surface for heartforge."""
