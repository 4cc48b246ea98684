from __future__ import annotations

from typing import Iterable


class RecipeBotError(Exception):
    """Base class for errors raised by the recipe chatbot."""


class ValidationError(RecipeBotError):
    """Malformed client input. Surfaced as a 400."""


class ProviderError(RecipeBotError):
    """Any failure while calling the hosted model."""


class PersistenceError(RecipeBotError):
    """Trace file could not be read or written."""


class ConfigError(RecipeBotError):
    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(
            f"Missing required environment variables: {', '.join(self.missing)}\n"
            "Please check your .env file and ensure all Azure OpenAI variables are set."
        )
