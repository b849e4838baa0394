"""
Иерархия ошибок uritpl.

Все ожидаемые ошибки (некорректный шаблон, отказ приёмника вывода)
наследуются от UriTemplateError и могут показываться пользователю
как есть, без трейсбека.

Нарушения внутренних инвариантов конечных автоматов сюда НЕ входят:
они поднимаются как AssertionError и должны всплывать с полным трейсбеком.
"""

from __future__ import annotations


class UriTemplateError(Exception):
    """
    Базовый класс для всех пользовательских ошибок uritpl.
    """
    pass


class ParseError(UriTemplateError):
    """
    Ошибка разбора шаблона с позицией в исходной строке.

    Attributes:
        message: Человекочитаемое описание
        position: Смещение (с нуля) проблемного места в шаблоне
        template: Исходный шаблон
    """

    def __init__(self, message: str, position: int, template: str = ""):
        self.message = message
        self.position = position
        self.template = template
        super().__init__(f"{message} at position {position}")

    def render(self) -> str:
        """
        Диагностика с кареткой под проблемным местом:

            error at col 3: found illegal character «\\»
            oh\\no
              ^
        """
        return f"error at col {self.position + 1}: {self.message}\n{self.template}\n{' ' * self.position}^"


class LexError(ParseError):
    """Лексер отверг шаблон (недопустимый символ, битый %XX, незакрытое выражение...)."""
    pass


class ExpectedVariableError(ParseError):
    """После '{', оператора, ',' или '.' должна идти переменная."""

    def __init__(self, position: int, template: str = ""):
        super().__init__("expected a variable name", position, template)


class DoubleModifierError(ParseError):
    """У переменной уже есть модификатор ':n' или '*'."""

    def __init__(self, position: int, template: str = ""):
        super().__init__("a variable can only have one modifier", position, template)


class UnexpectedAfterVariableError(ParseError):
    """После переменной допустимы только '.', ',', ':', '*' или '}'."""

    def __init__(self, position: int, template: str = ""):
        super().__init__("expected one of '.', ',', ':', '*' or '}' after variable", position, template)


class LengthOver9999Error(ParseError):
    """Длина префикса ':n' больше 9999."""

    def __init__(self, position: int, template: str = ""):
        super().__init__("prefix length must be between 0 and 9999", position, template)


class ExecutionError(UriTemplateError):
    """Приёмник вывода отказался принять очередной фрагмент."""
    pass


__all__ = [
    "UriTemplateError",
    "ParseError",
    "LexError",
    "ExpectedVariableError",
    "DoubleModifierError",
    "UnexpectedAfterVariableError",
    "LengthOver9999Error",
    "ExecutionError",
]
