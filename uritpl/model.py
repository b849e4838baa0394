"""
Модели данных разобранного шаблона URI.

Все узлы неизменяемы: один и тот же Ast можно многократно выполнять
с разными контекстами данных без повторного разбора.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterator, List, Optional, Tuple, Union

from .escape import Mask, escape

MAX_PREFIX_LENGTH = 9999


class Operator(Enum):
    """
    Оператор выражения: символ сразу после '{'.

    Каждый оператор задаёт свою таблицу раскрытия (RFC 6570, приложение A):
    печатаемый префикс, разделитель переменных, именованную форму key=value,
    маску экранирования и суффикс для пустых значений.
    """
    SIMPLE = ""
    RESERVED = "+"
    FRAGMENT = "#"
    LABEL = "."
    PATH = "/"
    PATH_PARAM = ";"
    QUERY = "?"
    CONTINUATION = "&"

    @property
    def prefix(self) -> str:
        if self in (Operator.SIMPLE, Operator.RESERVED):
            return ""
        return self.value

    @property
    def separator(self) -> str:
        if self in (Operator.LABEL, Operator.PATH, Operator.PATH_PARAM):
            return self.value
        if self in (Operator.QUERY, Operator.CONTINUATION):
            return "&"
        return ","

    @property
    def named(self) -> bool:
        return self in (Operator.PATH_PARAM, Operator.QUERY, Operator.CONTINUATION)

    @property
    def mask(self) -> Mask:
        if self in (Operator.RESERVED, Operator.FRAGMENT):
            return Mask.DISALLOWED
        return Mask.DISALLOWED | Mask.RESERVED

    @property
    def if_empty(self) -> str:
        # ';' печатает голое имя для пустого значения, '?' и '&' оставляют '='
        return "" if self is Operator.PATH_PARAM else "="


# -------------------- Модификаторы --------------------

@dataclass(frozen=True)
class Prefix:
    """Модификатор ':n': первые n символов значения."""
    length: int

    def __post_init__(self):
        if not 0 <= self.length <= MAX_PREFIX_LENGTH:
            raise ValueError(f"prefix length must be between 0 and {MAX_PREFIX_LENGTH}, got {self.length}")

    def __str__(self) -> str:
        return f":{self.length}"


@dataclass(frozen=True)
class Explode:
    """Модификатор '*'."""

    def __str__(self) -> str:
        return "*"


EXPLODE = Explode()

Modifier = Union[Prefix, Explode]


@dataclass(frozen=True)
class VarRef:
    """
    Ссылка на переменную: путь через точку плюс необязательный модификатор.

    {person.firstName:3} -> VarRef(("person", "firstName"), Prefix(3))
    """
    path: Tuple[str, ...]
    modifier: Optional[Modifier] = None

    def __post_init__(self):
        if not self.path:
            raise ValueError("variable path must not be empty")

    @property
    def root(self) -> str:
        """Имя переменной верхнего уровня."""
        return self.path[0]

    @property
    def name(self) -> str:
        """Последний сегмент пути: ключ в форме key=value."""
        return self.path[-1]

    @property
    def explode(self) -> bool:
        return isinstance(self.modifier, Explode)

    @property
    def prefix_length(self) -> Optional[int]:
        if isinstance(self.modifier, Prefix):
            return self.modifier.length
        return None

    def __str__(self) -> str:
        return ".".join(self.path) + (str(self.modifier) if self.modifier is not None else "")


# -------------------- Части шаблона --------------------

class PartType(Enum):
    """Типы частей шаблона."""
    LITERAL = "literal"
    SEPARATOR = "separator"
    EXPRESSION = "expression"


@dataclass(frozen=True)
class Part(ABC):
    """Базовый класс для частей шаблона."""

    @abstractmethod
    def get_type(self) -> PartType:
        """Возвращает тип части."""
        pass

    def __str__(self) -> str:
        """Часть в синтаксисе шаблона."""
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass(frozen=True)
class Literal(Part):
    """
    Литеральный текст, уже с раскодированными %XX.

    При обратной сериализации кодируются все символы, которые лексер
    не пропустил бы как есть, а также '/' (иначе он станет разделителем).
    """
    text: str

    def get_type(self) -> PartType:
        return PartType.LITERAL

    def _to_string(self) -> str:
        return escape(self.text, Mask.DISALLOWED).replace("/", "%2F").replace("'", "%27")


@dataclass(frozen=True)
class PathSeparator(Part):
    """'/' вне выражения; подряд идущие разделители схлопываются в один."""

    def get_type(self) -> PartType:
        return PartType.SEPARATOR

    def _to_string(self) -> str:
        return "/"


@dataclass(frozen=True)
class Expression(Part):
    """Выражение в фигурных скобках: оператор и непустой список переменных."""
    operator: Operator
    variables: Tuple[VarRef, ...]

    def __post_init__(self):
        if not self.variables:
            raise ValueError("expression must reference at least one variable")

    def get_type(self) -> PartType:
        return PartType.EXPRESSION

    def _to_string(self) -> str:
        return "{" + self.operator.value + ",".join(str(v) for v in self.variables) + "}"


SEPARATOR = PathSeparator()

AnyPart = Union[Literal, PathSeparator, Expression]


@dataclass(frozen=True)
class Ast:
    """
    Разобранный шаблон.

    variables вычисляется из частей и отдельно не изменяется.
    """
    parts: Tuple[AnyPart, ...] = ()
    variables: FrozenSet[str] = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "variables", frozenset(self.variable_names()))

    def expressions(self) -> Iterator[Expression]:
        for part in self.parts:
            if part.get_type() == PartType.EXPRESSION:
                yield part  # type: ignore[misc]

    def variable_names(self) -> List[str]:
        """Имена верхнего уровня в порядке первого появления."""
        seen: List[str] = []
        for expr in self.expressions():
            for var in expr.variables:
                if var.root not in seen:
                    seen.append(var.root)
        return seen

    def to_template(self) -> str:
        """Шаблон, разбор которого даёт эквивалентный Ast."""
        return "".join(str(part) for part in self.parts)

    def __str__(self) -> str:
        return self.to_template()


__all__ = [
    "MAX_PREFIX_LENGTH",
    "Operator",
    "Prefix",
    "Explode",
    "EXPLODE",
    "Modifier",
    "VarRef",
    "PartType",
    "Part",
    "Literal",
    "PathSeparator",
    "SEPARATOR",
    "Expression",
    "AnyPart",
    "Ast",
]
