"""
Лексические типы шаблонов URI.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Типы токенов, которые выдаёт TemplateLexer."""

    SEPARATOR = "SEPARATOR"    # / вне выражения
    LBRACE = "LBRACE"          # {
    RBRACE = "RBRACE"          # }
    OPERATOR = "OPERATOR"      # + # . / ; ? &
    EXPLODE = "EXPLODE"        # *
    PREFIX = "PREFIX"          # :
    LENGTH = "LENGTH"          # 1-4 цифры после ':'
    DOT = "DOT"                # . внутри имени переменной
    COMMA = "COMMA"            # ,
    RAW = "RAW"                # литеральный текст
    VARIABLE = "VARIABLE"      # имя (часть имени) переменной

    # Служебные токены: последний токен потока всегда один из них
    EOF = "EOF"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Token:
    """
    Токен с позицией в исходном шаблоне.

    Для ERROR value содержит текст ошибки, для EOF пустую строку.
    """
    type: TokenType
    value: str
    position: int

    @property
    def is_terminal(self) -> bool:
        return self.type in (TokenType.EOF, TokenType.ERROR)

    def __str__(self) -> str:
        if self.type == TokenType.ERROR:
            return f"ERROR {self.value}"
        if self.type == TokenType.EOF:
            return "EOF"
        if self.type == TokenType.RAW:
            return repr(self.value)
        if self.type == TokenType.VARIABLE:
            return f"'{self.value}'"
        return self.value

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"


__all__ = ["TokenType", "Token"]
