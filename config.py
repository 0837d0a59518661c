"""
Environment configuration for Createosaur.
API keys, external services, feature flags and logging.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

IMAGE_PROVIDERS = ('huggingface', 'openai', 'stability')

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass
class AppConfig:
    """Application settings; see load_config() for the variables read."""
    # Image generation
    image_provider: str = 'huggingface'
    image_api_key: Optional[str] = None
    default_model: str = 'stabilityai/stable-diffusion-xl-base-1.0'
    fallback_to_free: bool = True

    # Features
    enable_image_generation: bool = True
    enable_batch_generation: bool = True
    max_batch_size: int = 4
    enable_gallery: bool = True

    # UI
    enable_advanced_controls: bool = True
    show_debug_info: bool = False

    # Backends and data
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    search_endpoint: Optional[str] = None
    trait_catalog_file: Optional[str] = None
    preset_store_path: str = 'createosaur_store.json'
    log_level: str = 'INFO'

    @property
    def has_api_key(self) -> bool:
        return bool(self.image_api_key)

    @property
    def auth_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ('1', 'true', 'yes', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Load configuration from environment variables.

    Args:
        environ: Mapping to read instead of os.environ

    Returns:
        AppConfig with defaults overridden by any variables that are set

    Raises:
        ValueError: If a variable holds an invalid value
    """
    env = os.environ if environ is None else environ
    config = AppConfig()

    # Image generation settings
    if env.get('HUGGINGFACE_API_KEY'):
        config.image_api_key = env['HUGGINGFACE_API_KEY']

    if env.get('IMAGE_PROVIDER'):
        provider = env['IMAGE_PROVIDER'].strip().lower()
        if provider not in IMAGE_PROVIDERS:
            raise ValueError(f"IMAGE_PROVIDER must be one of {', '.join(IMAGE_PROVIDERS)}, got {provider!r}")
        config.image_provider = provider

    if env.get('DEFAULT_MODEL'):
        config.default_model = env['DEFAULT_MODEL']

    # Feature flags
    if env.get('ENABLE_IMAGE_GEN'):
        config.enable_image_generation = _parse_bool('ENABLE_IMAGE_GEN', env['ENABLE_IMAGE_GEN'])

    if env.get('MAX_BATCH_SIZE'):
        try:
            config.max_batch_size = int(env['MAX_BATCH_SIZE'])
        except ValueError:
            raise ValueError(f"MAX_BATCH_SIZE must be an integer, got {env['MAX_BATCH_SIZE']!r}")
        if config.max_batch_size < 1:
            raise ValueError(f"MAX_BATCH_SIZE must be at least 1, got {config.max_batch_size}")

    # UI settings
    if env.get('SHOW_DEBUG'):
        config.show_debug_info = _parse_bool('SHOW_DEBUG', env['SHOW_DEBUG'])

    # Backends
    config.supabase_url = env.get('SUPABASE_URL') or None
    config.supabase_anon_key = env.get('SUPABASE_ANON_KEY') or None
    config.search_endpoint = env.get('SEARCH_ENDPOINT') or None
    config.trait_catalog_file = env.get('TRAIT_CATALOG_FILE') or None
    if env.get('PRESET_STORE_PATH'):
        config.preset_store_path = env['PRESET_STORE_PATH']

    if env.get('LOG_LEVEL'):
        level = env['LOG_LEVEL'].strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL is not a logging level: {env['LOG_LEVEL']!r}")
        config.log_level = level

    return config


def configure_logging(config: AppConfig, verbose: bool = False) -> None:
    """Set up root logging for command-line and app entry points."""
    level = logging.DEBUG if verbose or config.show_debug_info else config.log_level
    logging.basicConfig(level=level, format=LOG_FORMAT)
