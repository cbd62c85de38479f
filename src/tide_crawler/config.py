"""
Settings and database credentials for the tide crawler.

Static settings (source URL, station, timezone, table name) come from a YAML
file under ``config/``. Database credentials only ever come from the process
environment.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from sqlalchemy.engine import URL

from .errors import ConfigError

logger = logging.getLogger(__name__)

# Project structure configuration
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_SETTINGS_FILE = CONFIG_DIR / "tide_crawler_settings.yaml"

DEFAULT_SETTINGS: Dict[str, Any] = {
    'api': {
        'base_url': 'https://tidesandcurrents.noaa.gov/noaatidepredictions/NOAATidesFacade.jsp',
        'datatype': 'Annual XML',
        'timeout': 30,
    },
    'station': {
        'id': '9414275',
    },
    'time': {
        'abbreviation': 'PST',
        'zone': 'America/Los_Angeles',
    },
    'database': {
        'table': 'tides',
        'sslmode': 'disable',
    },
}

# Environment variable for each database credential
DATABASE_ENV_VARS = {
    'user': 'DATABASEUSER',
    'password': 'DATABASEPASSWORD',
    'host': 'DATABASEURL',
    'name': 'DATABASENAME',
}
REQUIRED_DATABASE_KEYS = ('user', 'host', 'name')


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(settings_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load crawler settings from YAML, layered over the built-in defaults.

    Args:
        settings_file: Path to the settings file. Defaults to
            config/tide_crawler_settings.yaml under the project root.

    Returns:
        Settings dictionary with 'api', 'station', 'time' and 'database' sections

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping
    """
    settings_file = Path(settings_file) if settings_file else DEFAULT_SETTINGS_FILE

    try:
        with open(settings_file) as f:
            loaded = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning(f"Settings file not found at {settings_file}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {settings_file}: {e}")

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, Mapping):
        raise ConfigError(f"Settings file {settings_file} must contain a mapping")

    logger.debug(f"Loaded settings from {settings_file}")
    return _merge(DEFAULT_SETTINGS, loaded)


def load_database_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Read database credentials from the environment.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        Dict with 'user', 'password', 'host' and 'name'

    Raises:
        ConfigError: If user, host or database name is missing
    """
    environ = os.environ if environ is None else environ
    db_config = {key: environ.get(var, '') for key, var in DATABASE_ENV_VARS.items()}

    missing = [DATABASE_ENV_VARS[key] for key in REQUIRED_DATABASE_KEYS if not db_config[key]]
    if missing:
        raise ConfigError(f"Missing database environment variables: {', '.join(missing)}")

    return db_config


def build_database_url(db_config: Mapping[str, str], sslmode: str = 'disable') -> URL:
    """Assemble the PostgreSQL connection URL for the given credentials."""
    return URL.create(
        'postgresql+psycopg2',
        username=db_config['user'],
        password=db_config.get('password') or None,
        host=db_config['host'],
        database=db_config['name'],
        query={'sslmode': sslmode},
    )
