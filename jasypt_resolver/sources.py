"""Property sources — lookups of named configuration properties.

Sources implement a simple interface::

    class PropertySource:
        def contains(self, name: str) -> bool: ...
        def get_raw(self, name: str) -> Optional[Any]: ...
        def get_property(self, name, required_type=str, conversion_service=None): ...

Built-in sources:

* ``MapPropertySource`` — nested mapping addressed by dotted keys
* ``EnvPropertySource`` — environment variables (``a.b-c`` → ``A_B_C``)
* ``CompositePropertySource`` — ordered list of sources, first match wins
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from jasypt_resolver.conversion import ConversionService, default_conversion_service

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PropertySource(ABC):
    """Abstract base class for configuration property lookups."""

    name: str = "source"

    @abstractmethod
    def get_raw(self, name: str) -> Optional[Any]:
        """Return the raw value of property *name*, or ``None`` if absent."""

    def contains(self, name: str) -> bool:
        return self.get_raw(name) is not None

    def get_property(
        self,
        name: str,
        required_type: Type[T] = str,  # type: ignore[assignment]
        conversion_service: Optional[ConversionService] = None,
    ) -> Optional[T]:
        """Look up *name* and convert it to *required_type*.

        Returns ``None`` when the property is absent. Conversion failures
        raise :class:`~jasypt_resolver.errors.ConversionError`.
        """
        raw = self.get_raw(name)
        if raw is None:
            return None
        service = conversion_service or default_conversion_service
        return service.convert(raw, required_type)


# ── Mapping source ──────────────────────────────────────────────────────


def flatten_properties(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into dotted keys.

    Lists are kept as leaf values.
    """
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_properties(value, full_key))
        else:
            flat[full_key] = value
    return flat


class MapPropertySource(PropertySource):
    """Properties held in a (possibly nested) mapping.

    ``{"jasypt": {"encryption": {"password": "x"}}}`` and
    ``{"jasypt.encryption.password": "x"}`` are equivalent.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None, name: str = "map") -> None:
        self.name = name
        self._data: Dict[str, Any] = dict(data or {})
        self._flat = flatten_properties(self._data)

    @property
    def data(self) -> Dict[str, Any]:
        """The nested mapping this source was built from."""
        return self._data

    def get_raw(self, name: str) -> Optional[Any]:
        return self._flat.get(name)

    def property_names(self) -> List[str]:
        return sorted(self._flat)

    def __repr__(self) -> str:
        return f"MapPropertySource(name={self.name!r}, properties={len(self._flat)})"


# ── Environment source ──────────────────────────────────────────────────


class EnvPropertySource(PropertySource):
    """Reads properties from environment variables.

    The property ``jasypt.encryption.password`` maps to
    ``JASYPT_ENCRYPTION_PASSWORD`` (uppercased, dots and hyphens to
    underscores).
    """

    name = "env"

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ

    @staticmethod
    def env_key(name: str) -> str:
        return name.upper().replace(".", "_").replace("-", "_")

    def get_raw(self, name: str) -> Optional[str]:
        environ = self._environ if self._environ is not None else os.environ
        return environ.get(self.env_key(name))


# ── Composite source ────────────────────────────────────────────────────


class CompositePropertySource(PropertySource):
    """Consults *sources* in order; the first one holding the property wins."""

    name = "composite"

    def __init__(self, sources: Iterable[PropertySource]) -> None:
        self._sources: List[PropertySource] = list(sources)

    @property
    def sources(self) -> List[PropertySource]:
        return list(self._sources)

    def add_first(self, source: PropertySource) -> None:
        self._sources.insert(0, source)

    def add_last(self, source: PropertySource) -> None:
        self._sources.append(source)

    def get_raw(self, name: str) -> Optional[Any]:
        for source in self._sources:
            value = source.get_raw(name)
            if value is not None:
                logger.debug("Property '%s' found in '%s' source.", name, source.name)
                return value
        return None
