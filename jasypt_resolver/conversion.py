"""Type conversion service backed by pydantic ``TypeAdapter``.

Converts resolved string values into whatever type a caller asks for,
using pydantic's lax coercion rules::

    service = ConversionService()
    service.convert("42", int)        # 42
    service.convert("true", bool)     # True
    service.convert("a,b", List[str]) # ConversionError
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Any, Dict, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from jasypt_resolver.errors import ConversionError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConversionService:
    """Converts values to arbitrary target types.

    Adapters are built once per target type and cached.
    """

    def __init__(self) -> None:
        self._adapters: Dict[Any, TypeAdapter] = {}
        self._lock = threading.Lock()

    def _adapter_for(self, target_type: Any) -> TypeAdapter:
        adapter = self._adapters.get(target_type)
        if adapter is None:
            adapter = TypeAdapter(target_type)
            with self._lock:
                self._adapters.setdefault(target_type, adapter)
        return adapter

    def convert(self, value: Any, target_type: Type[T]) -> T:
        """Convert *value* to *target_type*.

        Raises :class:`ConversionError` if the value cannot be coerced. The
        offending value is deliberately left out of the error message.
        """
        if target_type is str:
            if isinstance(value, str):
                return value  # type: ignore[return-value]
            if isinstance(value, bool):
                # Rendered like Java's Boolean.toString
                return str(value).lower()  # type: ignore[return-value]
            if isinstance(value, (int, float, Decimal)):
                return str(value)  # type: ignore[return-value]
        if target_type is object or target_type is Any:
            return value
        try:
            return self._adapter_for(target_type).validate_python(value, strict=False)
        except ValidationError as exc:
            raise ConversionError(target_type, exc) from None

    def can_convert(self, value: Any, target_type: Any) -> bool:
        try:
            self.convert(value, target_type)
        except ConversionError:
            return False
        return True


# Shared default instance for callers that do not bring their own.
default_conversion_service = ConversionService()
