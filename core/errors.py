"""
core/errors.py

Exception hierarchy shared by the resolution engine and the providers.
- ProviderError: a calendar/places service failed; the turn apologizes
- NotSupportedError: a provider does not implement the requested capability
- ConfigError: settings are missing or malformed
"""


class AssistantError(Exception):
    """Base exception for the assistant."""


class ProviderError(AssistantError):
    """A calendar or places provider call failed."""


class NotSupportedError(ProviderError):
    """The provider does not implement this operation."""


class ConfigError(AssistantError):
    """Configuration errors."""
