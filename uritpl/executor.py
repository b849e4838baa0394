"""
Исполнитель шаблонов URI.

Проходит по частям Ast и раскрывает выражения в контексте данных
по таблице операторов RFC 6570. Неопределённые переменные молча
пропускаются; ошибкой считается только отказ приёмника вывода.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol, cast

from .errors import ExecutionError
from .escape import escape
from .model import Ast, Expression, Literal, PartType, VarRef
from .values import Value, ValueKind

logger = logging.getLogger(__name__)

# Разделитель элементов списка и пар отображения внутри одного значения
LIST_SEPARATOR = ","


class Sink(Protocol):
    """Приёмник вывода: всё, у чего есть write(str)."""

    def write(self, s: str) -> Any: ...


class _ExpressionWriter:
    """
    Буфер раскрытия одного выражения.

    Считает фактически выведенные элементы: от счётчика зависят
    разделители переменных и судьба префикса оператора.
    """

    def __init__(self, expr: Expression, data: Value):
        self.expr = expr
        self.op = expr.operator
        self.data = data
        self.buf: List[str] = []
        self.count = 0

    def render(self) -> str:
        for var in self.expr.variables:
            value = self.data.resolve(var.path)
            if not value.defined:
                continue
            if value.kind == ValueKind.LIST:
                self._write_list(var, value)
            elif value.kind == ValueKind.MAPPING:
                self._write_mapping(var, value)
            else:
                self._write_item(var.name, self._format(value, var.prefix_length))

        # RFC 6570, 3.2.1: без определённых значений выражение пусто, префикс оператора тоже не пишется
        if self.count == 0:
            return ""
        return self.op.prefix + "".join(self.buf)

    def _format(self, value: Value, prefix_length: Optional[int] = None) -> str:
        text = value.text()
        if prefix_length is not None:
            text = text[:prefix_length]
        return escape(text, self.op.mask)

    def _write_item(self, key: str, payload: str) -> None:
        """Один элемент выражения: разделитель, имя для именованных операторов, значение."""
        if self.count > 0:
            self.buf.append(self.op.separator)
        if self.op.named:
            self.buf.append(key)
            self.buf.append(self.op.if_empty if payload == "" else "=")
        self.buf.append(payload)
        self.count += 1

    def _write_list(self, var: VarRef, value: Value) -> None:
        elements = list(value.elements())
        if not elements:
            return

        if not var.explode:
            payload = LIST_SEPARATOR.join(self._format(item, var.prefix_length) for item in elements)
            self._write_item(var.name, payload)
            return

        for item in elements:
            self._write_item(var.name, self._format(item))

    def _write_mapping(self, var: VarRef, value: Value) -> None:
        entries = [(escape(key, self.op.mask), self._format(item)) for key, item in value.items()]
        if not entries:
            return

        if not var.explode:
            payload = LIST_SEPARATOR.join(part for pair in entries for part in pair)
            self._write_item(var.name, payload)
            return

        for key, text in entries:
            if self.op.named:
                self._write_item(key, text)
            else:
                self._write_item(var.name, f"{key}={text}")


class TemplateExecutor:
    """
    Исполнитель разобранных шаблонов.

    Контекст только читается, поэтому один исполнитель можно
    применять к любому числу Ast, в том числе параллельно.
    """

    def __init__(self, context: Any):
        """
        Args:
            context: Словарь, запись (dataclass, pydantic, namedtuple) или Value
        """
        self.context = context
        self._data = Value.of(context)

    def execute(self, ast: Ast, sink: Optional[Sink] = None) -> str:
        """
        Раскрывает шаблон.

        Args:
            ast: Разобранный шаблон
            sink: Необязательный приёмник; каждая часть пишется в него сразу

        Returns:
            Полный результат раскрытия

        Raises:
            ExecutionError: Если приёмник отказался принять запись
        """
        out: List[str] = []
        for part in ast.parts:
            part_type = part.get_type()
            if part_type == PartType.LITERAL:
                chunk = cast(Literal, part).text
            elif part_type == PartType.SEPARATOR:
                chunk = "/"
            elif part_type == PartType.EXPRESSION:
                chunk = self.expand_expression(cast(Expression, part))
            else:
                raise AssertionError(f"Unknown part type: {part_type}")

            if sink is not None and chunk:
                self._write(sink, chunk)
            out.append(chunk)

        return "".join(out)

    def expand_expression(self, expr: Expression) -> str:
        """Раскрывает одно выражение."""
        result = _ExpressionWriter(expr, self._data).render()
        if not result:
            logger.debug(f"Expression {expr} expanded to nothing")
        return result

    @staticmethod
    def _write(sink: Sink, chunk: str) -> None:
        try:
            sink.write(chunk)
        except (OSError, ValueError) as e:
            raise ExecutionError(f"failed to write expansion output: {e}") from e


def execute(ast: Ast, context: Any, sink: Optional[Sink] = None) -> str:
    """Удобная функция: раскрытие Ast в контексте."""
    return TemplateExecutor(context).execute(ast, sink)


def expand(template: str, context: Any, sink: Optional[Sink] = None) -> str:
    """
    Разбор и раскрытие шаблона одной функцией.

    Raises:
        ParseError: При ошибке разбора
        ExecutionError: При ошибке записи в приёмник
    """
    from .parser import TemplateParser

    ast = TemplateParser().parse(template)
    return TemplateExecutor(context).execute(ast, sink)


__all__ = ["TemplateExecutor", "Sink", "execute", "expand", "LIST_SEPARATOR"]
