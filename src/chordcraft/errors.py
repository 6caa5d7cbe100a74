"""Custom exceptions for the chord progression pipeline."""

from __future__ import annotations


class ChordCraftError(RuntimeError):
    """Base class for every error raised by the pipeline."""


class ConfigurationError(ChordCraftError):
    """Raised when credentials or store settings are missing."""


class ModelCallError(ChordCraftError):
    """Raised when the model call fails or returns no content."""


class ValidationFailure(ChordCraftError):
    """Raised when model output cannot be parsed or does not conform."""


class PersistenceError(ChordCraftError):
    """Raised when a store read or write fails."""
