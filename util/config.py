"""
util/config.py

Settings loaded from the environment (and an optional .env file).

Environment variables:
- GOOGLE_MAPS_API_KEY        key for Places text search and Static Maps
- GOOGLE_PLACES_API_KEY      key for Place Details (defaults to the maps key)
- GOOGLE_DIRECTIONS_API_KEY  key for Directions (defaults to the maps key)
- GOOGLE_CALENDAR_TOKEN      OAuth bearer token for Calendar v3
- CALENDAR_PROVIDER          memory | google (default memory)
- ASSISTANT_TIMEZONE         default America/Los_Angeles
- DEFAULT_COORDINATES        "lat,lng" used when the client sends no location
- DEFAULT_ADDRESS            origin for directions links
- ATTENDEE_EMAIL_DOMAIN      domain used to turn attendee names into emails
- HISTORY_TURNS              replies kept per conversation (default 6)
- SESSION_IDLE_MINUTES       idle minutes before a conversation is dropped (default 60, 0 = never)
- LOG_LEVEL                  default INFO
"""

import logging
import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from core.errors import ConfigError


logger = logging.getLogger(__name__)

CALENDAR_PROVIDERS = {"memory", "google"}


@dataclass
class Settings:
    google_maps_api_key: str = ""
    google_places_api_key: str = ""
    google_directions_api_key: str = ""
    google_calendar_token: str = ""
    calendar_provider: str = "memory"
    time_zone: str = "America/Los_Angeles"
    default_coordinates: str = "33.078855,-96.826350"
    default_address: str = "5905 Legacy Dr, Plano, TX"
    attendee_email_domain: str = "example.com"
    history_turns: int = 6
    session_idle_minutes: int = 60
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file=None):
        load_dotenv(env_file)
        maps_key = os.getenv("GOOGLE_MAPS_API_KEY", "")
        try:
            history_turns = int(os.getenv("HISTORY_TURNS", "6"))
        except ValueError as exc:
            raise ConfigError(f"HISTORY_TURNS must be an integer: {exc}") from exc
        try:
            session_idle_minutes = int(os.getenv("SESSION_IDLE_MINUTES", "60"))
        except ValueError as exc:
            raise ConfigError(f"SESSION_IDLE_MINUTES must be an integer: {exc}") from exc
        settings = cls(
            google_maps_api_key=maps_key,
            google_places_api_key=os.getenv("GOOGLE_PLACES_API_KEY", maps_key),
            google_directions_api_key=os.getenv("GOOGLE_DIRECTIONS_API_KEY", maps_key),
            google_calendar_token=os.getenv("GOOGLE_CALENDAR_TOKEN", ""),
            calendar_provider=os.getenv("CALENDAR_PROVIDER", "memory").strip().lower(),
            time_zone=os.getenv("ASSISTANT_TIMEZONE", cls.time_zone),
            default_coordinates=os.getenv("DEFAULT_COORDINATES", cls.default_coordinates),
            default_address=os.getenv("DEFAULT_ADDRESS", cls.default_address),
            attendee_email_domain=os.getenv("ATTENDEE_EMAIL_DOMAIN", cls.attendee_email_domain),
            history_turns=history_turns,
            session_idle_minutes=session_idle_minutes,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
        settings.validate()
        return settings

    def validate(self):
        if self.calendar_provider not in CALENDAR_PROVIDERS:
            raise ConfigError(
                f"CALENDAR_PROVIDER must be one of {sorted(CALENDAR_PROVIDERS)}, got {self.calendar_provider!r}"
            )
        if self.calendar_provider == "google" and not self.google_calendar_token:
            raise ConfigError("CALENDAR_PROVIDER=google requires GOOGLE_CALENDAR_TOKEN")
        if self.session_idle_minutes < 0:
            raise ConfigError("SESSION_IDLE_MINUTES must not be negative")
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"Unknown time zone {self.time_zone!r}") from exc
        if not self.google_maps_api_key:
            logger.warning("GOOGLE_MAPS_API_KEY is not set; place searches will fail")


def configure_logging(level="INFO"):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
