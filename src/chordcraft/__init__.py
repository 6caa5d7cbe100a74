"""ChordCraft: chord-progression generation, scoring and deduplication."""

__version__ = "0.1.0"
