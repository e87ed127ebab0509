"""
Runtime settings for the feed importer.

Values come from the process environment, optionally seeded from a .env file
in the working directory.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from catalog_import.exceptions import ConfigurationError

DEFAULT_FEED_PATH = "data.xml"

# Storefront builds expose the project URL under their own prefixes
SUPABASE_URL_VARS = ('SUPABASE_URL', 'VITE_SUPABASE_URL', 'NEXT_PUBLIC_SUPABASE_URL')
SUPABASE_KEY_VARS = ('SUPABASE_SERVICE_ROLE_KEY', 'SUPABASE_KEY')


@dataclass(frozen=True)
class Settings:
    """Resolved importer configuration"""
    supabase_url: str
    supabase_key: str
    feed_path: Path
    log_level: str = "INFO"
    log_dir: str = "logs"
    sentry_dsn: Optional[str] = None
    sentry_environment: str = "development"
    sentry_traces_sample_rate: float = 0.0


def load_env_file(env_path: Optional[str] = None) -> None:
    """Load a .env file without overriding variables already set."""
    load_dotenv(env_path or os.path.join(os.getcwd(), ".env"), encoding="utf-8")


def _first_set(env: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    feed_path: Optional[str] = None,
    cwd: Optional[Path] = None,
) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env: Mapping to read from, defaults to os.environ
        feed_path: Feed path override (e.g. from the command line)
        cwd: Directory relative feed paths are resolved against

    Raises:
        ConfigurationError: If the store URL or service key is missing
    """
    env = os.environ if env is None else env

    supabase_url = _first_set(env, SUPABASE_URL_VARS)
    supabase_key = _first_set(env, SUPABASE_KEY_VARS)
    if not supabase_url or not supabase_key:
        raise ConfigurationError(
            "Missing required environment variables. "
            "Please ensure SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are set in your .env file."
        )

    path = Path(feed_path or env.get('FEED_PATH') or DEFAULT_FEED_PATH)
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path

    return Settings(
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        feed_path=path,
        log_level=env.get('LOG_LEVEL', 'INFO'),
        log_dir=env.get('LOG_DIR', 'logs'),
        sentry_dsn=env.get('SENTRY_DSN'),
        sentry_environment=env.get('SENTRY_ENVIRONMENT', 'development'),
        sentry_traces_sample_rate=float(env.get('SENTRY_TRACES_SAMPLE_RATE', '0.0')),
    )
