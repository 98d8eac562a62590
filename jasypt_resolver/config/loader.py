"""Configuration file loading.

Loads a YAML configuration file, expands ``${ENV_VAR}`` placeholders and
wraps the result in a :class:`~jasypt_resolver.sources.MapPropertySource`.
``${ENC(...)}`` and ``${dotted.key}`` placeholders are left in place for
the expression resolver chain.
"""

import logging
import os
import re
from typing import Any, Dict

import yaml

from jasypt_resolver.errors import ConfigurationError
from jasypt_resolver.sources import MapPropertySource

logger = logging.getLogger(__name__)

# Recognised config file extensions.
_YAML_EXTS = frozenset({".yaml", ".yml"})

# Only bare identifiers are environment references: ${HOME}, not ${db.host}
_ENV_REF_RE = re.compile(r"\$\{(\w+)\}")


def expand_env_vars(value: Any) -> Any:
    """Substitute ``${NAME}`` with ``os.environ["NAME"]`` in every string leaf.

    Unset variables keep their placeholder.
    """
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    if not isinstance(value, str):
        return value

    def _lookup(match: "re.Match[str]") -> str:
        return os.environ.get(match.group(1), match.group(0))

    return _ENV_REF_RE.sub(_lookup, value)


def _read_config_file(cfg_fpath: str) -> Dict[str, Any]:
    """Read and parse a YAML config file from *cfg_fpath*.

    Raises :class:`ConfigurationError` on I/O or parse errors.
    """
    ext = os.path.splitext(cfg_fpath)[1].lower()
    if ext not in _YAML_EXTS:
        raise ConfigurationError(
            f"Unsupported config file extension '{ext}'. "
            "Only YAML files (.yaml, .yml) are supported."
        )

    try:
        with open(cfg_fpath, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Error reading configuration file: {cfg_fpath}\n  {exc}") from exc

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError(
            "Top-level configuration content must be a YAML mapping (dictionary)."
        )
    return raw_data


def load_property_source(cfg_fpath: str) -> MapPropertySource:
    """Load *cfg_fpath* into a property source.

    Raises:
        ConfigurationError: If the file is missing, unreadable, not YAML,
            or not a mapping at the top level.
    """
    logger.debug("Loading configuration file: %s", cfg_fpath)

    if not os.path.exists(cfg_fpath):
        raise ConfigurationError(f"Configuration file does not exist: {cfg_fpath}")

    raw_data = expand_env_vars(_read_config_file(cfg_fpath))
    source = MapPropertySource(raw_data, name=os.path.basename(cfg_fpath))
    logger.info(
        "Configuration '%s' loaded. %d properties found.",
        cfg_fpath,
        len(source.property_names()),
    )
    return source
