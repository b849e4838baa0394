"""
Полиморфные значения контекста данных.

Любой объект контекста сводится к одному из четырёх видов:
UNDEFINED, SCALAR, LIST или MAPPING. Исполнитель шаблонов работает
только с этими видами и не смотрит на конкретные типы Python.

Поиск по сегменту пути:
  • ключ словаря (точное совпадение строкового ключа);
  • поле записи по объявленному имени: dataclass, модель pydantic, namedtuple;
  • поле записи по альтернативному имени: metadata={"uri": ...} у dataclass,
    alias у поля pydantic.
Первое совпадение выигрывает, промах даёт UNDEFINED.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Tuple

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Ключ metadata поля dataclass с альтернативным именем переменной
URI_NAME = "uri"


class ValueKind(Enum):
    UNDEFINED = "undefined"
    SCALAR = "scalar"
    LIST = "list"
    MAPPING = "mapping"


_MISSING = object()


def _deref(obj: Any) -> Any:
    # Value и члены Enum прозрачны для поиска и форматирования
    while True:
        if isinstance(obj, Value):
            obj = obj.raw
        elif isinstance(obj, Enum):
            obj = obj.value
        else:
            return obj


def _classify(obj: Any) -> ValueKind:
    if obj is None:
        return ValueKind.UNDEFINED
    if isinstance(obj, (str, bytes, bytearray, bool, int, float)):
        return ValueKind.SCALAR
    if isinstance(obj, Mapping):
        return ValueKind.MAPPING if len(obj) else ValueKind.UNDEFINED
    if isinstance(obj, (Sequence, Set)):
        return ValueKind.LIST if len(obj) else ValueKind.UNDEFINED
    return ValueKind.SCALAR


def _lookup_dataclass(obj: Any, key: str) -> Any:
    flds = dataclasses.fields(obj)
    for f in flds:
        if f.name == key:
            return getattr(obj, f.name)
    for f in flds:
        if f.metadata.get(URI_NAME) == key:
            return getattr(obj, f.name)
    return _MISSING


def _lookup_pydantic(obj: BaseModel, key: str) -> Any:
    model_fields = type(obj).model_fields
    if key in model_fields:
        return getattr(obj, key)
    for name, info in model_fields.items():
        if info.alias == key:
            return getattr(obj, name)
    return _MISSING


def _lookup(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj[key] if key in obj else _MISSING
    if isinstance(obj, BaseModel):
        return _lookup_pydantic(obj, key)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _lookup_dataclass(obj, key)
    if isinstance(obj, tuple) and key in getattr(obj, "_fields", ()):
        return getattr(obj, key)
    return _MISSING


def scalar_text(obj: Any) -> str:
    """
    Каноническое строковое представление скалярного значения.

    Булевы значения печатаются как true/false, байты раскодируются
    из UTF-8 (с surrogateescape), остальное через str().
    """
    obj = _deref(obj)
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, str):
        return obj
    if isinstance(obj, (bytes, bytearray)):
        return bytes(obj).decode("utf-8", "surrogateescape")
    return str(obj)


@dataclass(frozen=True)
class Value:
    """
    Значение контекста с явным видом.

    Attributes:
        raw: Исходный объект Python (после разыменования)
        kind: Вид значения
    """
    raw: Any
    kind: ValueKind

    @classmethod
    def of(cls, obj: Any) -> "Value":
        """Оборачивает произвольный объект контекста."""
        if isinstance(obj, Value):
            return obj
        obj = _deref(obj)
        return cls(obj, _classify(obj))

    @property
    def defined(self) -> bool:
        return self.kind != ValueKind.UNDEFINED

    def get(self, key: str) -> "Value":
        """Один шаг поиска по имени."""
        if self.raw is None:
            return UNDEFINED
        found = _lookup(self.raw, key)
        if found is _MISSING:
            return UNDEFINED
        return Value.of(found)

    def resolve(self, path: Iterable[str]) -> "Value":
        """
        Проходит путь переменной, например ("person", "firstName").

        Returns:
            Найденное значение или UNDEFINED
        """
        current = self
        for segment in path:
            current = current.get(segment)
            if not current.defined:
                logger.debug(f"Variable segment '{segment}' is undefined")
                return UNDEFINED
        return current

    def text(self) -> str:
        """Строковое представление скаляра."""
        return scalar_text(self.raw)

    def elements(self) -> Iterator["Value"]:
        """Элементы списка; неопределённые элементы пропускаются."""
        if self.kind != ValueKind.LIST:
            return
        for item in self.raw:
            value = Value.of(item)
            if value.raw is not None:
                yield value

    def items(self) -> Iterator[Tuple[str, "Value"]]:
        """Пары ключ/значение отображения в порядке итерации; None-значения пропускаются."""
        if self.kind != ValueKind.MAPPING:
            return
        for key, item in self.raw.items():
            value = Value.of(item)
            if value.raw is not None:
                yield scalar_text(key), value


UNDEFINED = Value(None, ValueKind.UNDEFINED)


__all__ = ["Value", "ValueKind", "UNDEFINED", "URI_NAME", "scalar_text"]
