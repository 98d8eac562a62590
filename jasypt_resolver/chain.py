"""Expression resolver chain — ``${expression}`` placeholder resolution.

A configuration value may embed placeholders such as ``${ENC(...)}`` or
``${db.host}``. The chain hands each placeholder body to its resolvers in
order; the first resolver returning a value other than ``None`` claims it.

Usage::

    chain = ExpressionResolverChain([
        JasyptPropertyExpressionResolver(),
        PropertyReferenceResolver(),
    ])
    resolved = chain.resolve_config(source.data, source)

Placeholders no resolver claims are left unchanged.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from jasypt_resolver.conversion import ConversionService, default_conversion_service
from jasypt_resolver.sources import PropertySource

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ${...} where the body may itself contain balanced parentheses, e.g. ${ENC(a==)}
_PLACEHOLDER_RE = re.compile(r"\$\{((?:[^{}()]|\([^()]*\))+)\}")


class ExpressionResolver(ABC):
    """One link in the resolver chain."""

    @abstractmethod
    def resolve(
        self,
        property_source: PropertySource,
        conversion_service: ConversionService,
        expression: str,
        required_type: Type[T],
    ) -> Optional[T]:
        """Resolve *expression*, or return ``None`` to defer to the next resolver."""


class PropertyReferenceResolver(ExpressionResolver):
    """Resolves expressions that name another property (``${db.host}``)."""

    def resolve(
        self,
        property_source: PropertySource,
        conversion_service: ConversionService,
        expression: str,
        required_type: Type[T],
    ) -> Optional[T]:
        return property_source.get_property(expression.strip(), required_type, conversion_service)


class ExpressionResolverChain:
    """Ordered collection of :class:`ExpressionResolver` instances.

    Parameters
    ----------
    resolvers:
        Resolvers consulted in order.
    conversion_service:
        Service passed to every resolver. Defaults to the shared instance.
    """

    def __init__(
        self,
        resolvers: Iterable[ExpressionResolver],
        conversion_service: Optional[ConversionService] = None,
    ) -> None:
        self._resolvers: List[ExpressionResolver] = list(resolvers)
        self._conversion_service = conversion_service or default_conversion_service

    @property
    def resolvers(self) -> List[ExpressionResolver]:
        return list(self._resolvers)

    def resolve(
        self,
        property_source: PropertySource,
        expression: str,
        required_type: Type[T] = str,  # type: ignore[assignment]
    ) -> Optional[T]:
        """Return the first non-``None`` result from the chain."""
        for resolver in self._resolvers:
            value = resolver.resolve(
                property_source, self._conversion_service, expression, required_type
            )
            if value is not None:
                return value
        return None

    def resolve_placeholders(self, property_source: PropertySource, value: str) -> Any:
        """Replace every ``${expression}`` inside *value*.

        A value that is exactly one placeholder resolves to the resolver's
        result. Embedded placeholders are substituted as text.
        """
        whole = _PLACEHOLDER_RE.fullmatch(value)
        if whole:
            resolved = self.resolve(property_source, whole.group(1))
            return value if resolved is None else resolved

        def _sub(match: re.Match[str]) -> str:
            resolved = self.resolve(property_source, match.group(1))
            return match.group(0) if resolved is None else str(resolved)

        return _PLACEHOLDER_RE.sub(_sub, value)

    def resolve_config(
        self,
        config: Dict[str, Any],
        property_source: PropertySource,
    ) -> Dict[str, Any]:
        """Walk *config* and resolve placeholders in every string leaf.

        The input is not mutated; a resolved copy is returned.
        """
        return self._walk(config, property_source, path="")

    def _walk(self, value: Any, property_source: PropertySource, *, path: str) -> Any:
        if isinstance(value, dict):
            return {
                k: self._walk(v, property_source, path=f"{path}.{k}" if path else str(k))
                for k, v in value.items()
            }
        if isinstance(value, list):
            return [
                self._walk(item, property_source, path=f"{path}[{i}]")
                for i, item in enumerate(value)
            ]
        if isinstance(value, str) and "${" in value:
            resolved = self.resolve_placeholders(property_source, value)
            if resolved != value:
                logger.debug("Resolved placeholder(s) at %s", path)
            return resolved
        return value
