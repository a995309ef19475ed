"""
src/config.py
==============
Deployment Settings - VoiceBase Connect Gateway

Responsibility:
    - Load deployment-wide settings from the environment (a ``.env`` file
      is honored via python-dotenv)
    - Provide typed setting readers that fall back to defaults on bad input
    - Expose the feature toggles that gate optional capabilities

Settings are read once per process. Per-call options come from contact
attributes instead (see src/request/builder.py).

This module does NOT:
    - Validate the API token
    - Read per-call attributes
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("vbgateway.config")


# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_API_URL = "VOICEBASE_API_URL"
ENV_TOKEN = "VOICEBASE_TOKEN"
ENV_TIMEOUT_SECONDS = "VOICEBASE_TIMEOUT_SECONDS"

ENV_PREDICTIONS_ENABLED = "VOICEBASE_PREDICTIONS_ENABLED"
ENV_KNOWLEDGE_DISCOVERY_ENABLED = "VOICEBASE_KNOWLEDGE_DISCOVERY_ENABLED"
ENV_ADVANCED_PUNCTUATION_ENABLED = "VOICEBASE_ADVANCED_PUNCTUATION_ENABLED"
ENV_INDEXING_ENABLED = "VOICEBASE_INDEXING_ENABLED"
ENV_CATEGORIZATION_ENABLED = "VOICEBASE_CATEGORIZATION_ENABLED"
ENV_CONFIGURE_SPEAKERS = "VOICEBASE_CONFIGURE_SPEAKERS"
ENV_LEFT_SPEAKER_NAME = "VOICEBASE_LEFT_SPEAKER_NAME"
ENV_RIGHT_SPEAKER_NAME = "VOICEBASE_RIGHT_SPEAKER_NAME"

ENV_CALLBACK_URL = "VOICEBASE_CALLBACK_URL"
ENV_CALLBACK_METHOD = "VOICEBASE_CALLBACK_METHOD"
ENV_CALLBACK_INCLUDES = "VOICEBASE_CALLBACK_INCLUDES"
ENV_CALLBACK_ADDITIONAL_URLS = "VOICEBASE_CALLBACK_ADDITIONAL_URLS"

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "https://apis.voicebase.com/v3"
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_LEFT_SPEAKER_NAME = "Customer"
DEFAULT_RIGHT_SPEAKER_NAME = "Agent"
DEFAULT_CALLBACK_METHOD = "POST"
DEFAULT_CALLBACK_INCLUDES = "transcript,knowledge,metadata,prediction,spotting,metrics,categories"

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}


# ---------------------------------------------------------------------------
# Typed readers
# ---------------------------------------------------------------------------


def get_string_setting(env: Mapping[str, str], name: str, default: str | None = None) -> str | None:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_boolean_setting(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    token = value.strip().lower()
    if token in _TRUE_VALUES:
        return True
    if token in _FALSE_VALUES:
        return False
    logger.warning("Invalid boolean for %s: %r, using default %s", name, value, default)
    return default


def get_int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Invalid integer for %s: %r, using default %d", name, value, default)
        return default


def get_list_setting(env: Mapping[str, str], name: str, default: str | None = None) -> tuple[str, ...]:
    """Split a comma-separated setting, dropping blanks."""
    value = get_string_setting(env, name, default)
    if value is None:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FeatureToggles:
    """Deployment-wide gates for optional capabilities."""

    predictions: bool = True
    knowledge_discovery: bool = False
    advanced_punctuation: bool = True
    indexing: bool = True
    categorization: bool = True
    configure_speakers: bool = True


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    token: str | None = None
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    toggles: FeatureToggles = field(default_factory=FeatureToggles)
    left_speaker_name: str | None = DEFAULT_LEFT_SPEAKER_NAME
    right_speaker_name: str | None = DEFAULT_RIGHT_SPEAKER_NAME
    callback_url: str | None = None
    callback_method: str = DEFAULT_CALLBACK_METHOD
    callback_includes: tuple[str, ...] = ()
    callback_additional_urls: tuple[str, ...] = ()


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from ``env`` (defaults to ``os.environ``).

    Bad values never abort startup: each falls back to its default with a
    warning.
    """
    if env is None:
        env = os.environ

    toggles = FeatureToggles(
        predictions=get_boolean_setting(env, ENV_PREDICTIONS_ENABLED, True),
        knowledge_discovery=get_boolean_setting(env, ENV_KNOWLEDGE_DISCOVERY_ENABLED, False),
        advanced_punctuation=get_boolean_setting(env, ENV_ADVANCED_PUNCTUATION_ENABLED, True),
        indexing=get_boolean_setting(env, ENV_INDEXING_ENABLED, True),
        categorization=get_boolean_setting(env, ENV_CATEGORIZATION_ENABLED, True),
        configure_speakers=get_boolean_setting(env, ENV_CONFIGURE_SPEAKERS, True),
    )

    settings = Settings(
        api_url=get_string_setting(env, ENV_API_URL, DEFAULT_API_URL).rstrip("/"),
        token=get_string_setting(env, ENV_TOKEN),
        timeout_seconds=get_int_setting(env, ENV_TIMEOUT_SECONDS, DEFAULT_TIMEOUT_SECONDS),
        toggles=toggles,
        left_speaker_name=get_string_setting(env, ENV_LEFT_SPEAKER_NAME, DEFAULT_LEFT_SPEAKER_NAME),
        right_speaker_name=get_string_setting(env, ENV_RIGHT_SPEAKER_NAME, DEFAULT_RIGHT_SPEAKER_NAME),
        callback_url=get_string_setting(env, ENV_CALLBACK_URL),
        callback_method=get_string_setting(env, ENV_CALLBACK_METHOD, DEFAULT_CALLBACK_METHOD),
        callback_includes=get_list_setting(env, ENV_CALLBACK_INCLUDES, DEFAULT_CALLBACK_INCLUDES),
        callback_additional_urls=get_list_setting(env, ENV_CALLBACK_ADDITIONAL_URLS),
    )

    logger.debug("Settings loaded: %s", settings.toggles)
    return settings
