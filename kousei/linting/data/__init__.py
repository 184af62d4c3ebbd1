"""Dictionary tables used by the built-in rules."""
