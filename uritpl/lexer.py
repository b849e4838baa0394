"""
Лексер шаблонов URI (RFC 6570).

Конечный автомат с состояниями PATH, RAW, PERCENT, BEGIN_EXPR, IN_EXPR, LENGTH.
Каждое состояние реализовано генератором: он выдаёт токены и возвращает
следующее состояние (None завершает поток). Токены отдаются лениво, по одному,
и поток всегда заканчивается ровно одним токеном EOF или ERROR.
"""

from __future__ import annotations

import logging
import re
import string
from typing import Callable, Generator, Iterator, Optional

from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

# Состояние: генератор токенов, возвращающий следующее состояние
StateFn = Callable[[], Generator[Token, None, Optional["StateFn"]]]

VARCHARS = frozenset(string.ascii_letters + string.digits + "_")
OPERATORS = "+#./;?&"
RESERVED_OPERATORS = "=,!@|"

_ILLEGAL_RAW = "\"'<>\\^|}`"
_RAW_STOP = re.compile(r"[/{%]")
# Суррогаты, которые surrogateescape не переводит обратно в байт
_BAD_SURROGATE = re.compile("[\ud800-\udc7f\udd00-\udfff]")
_HEXDIGITS = frozenset(string.hexdigits)
_DIGITS = frozenset(string.digits)
_MAX_LENGTH_DIGITS = 4


def describe_char(c: str) -> str:
    """Кодовая точка в виде U+0041 'A' (непечатаемые символы без кавычек)."""
    code = f"U+{ord(c):04X}"
    return f"{code} '{c}'" if c.isprintable() else code


def error_illegal(c: str) -> str:
    return f"found illegal character «{c}»"


def error_unfinished_percent() -> str:
    return "expected two hex digits"


def error_illegal_percent(c: str) -> str:
    return f"{error_unfinished_percent()}, got {describe_char(c)}"


def error_unfinished_expr() -> str:
    return "expected '}', got EOF"


def error_empty_expr() -> str:
    return "empty expression"


def error_unexpected(c: str) -> str:
    return f"unexpected {describe_char(c)}"


def error_reserved_op(c: str) -> str:
    return f"unexpected reserved operator {describe_char(c)}"


def error_expected_length() -> str:
    return "expected length"


class TemplateLexer:
    """
    Одноразовый итератор токенов шаблона.

    Повторное сканирование требует нового экземпляра: после EOF или ERROR
    итератор исчерпан.
    """

    def __init__(self, template: str):
        self.template = template
        self.start = 0
        self.pos = 0
        self.length = len(template)
        self._tokens = self._run()

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        return next(self._tokens)

    def _run(self) -> Iterator[Token]:
        state: Optional[StateFn] = self._lex_path
        while state is not None:
            state = yield from state()
        logger.debug(f"Finished tokenizing template of length {self.length} at position {self.pos}")

    # Вспомогательные методы

    def _eof(self) -> bool:
        return self.pos >= self.length

    def _emit(self, token_type: TokenType) -> Token:
        token = Token(token_type, self.template[self.start:self.pos], self.start)
        self.start = self.pos
        return token

    def _emit_value(self, token_type: TokenType, value: str) -> Token:
        token = Token(token_type, value, self.start)
        self.start = self.pos
        return token

    def _error(self, message: str, position: int) -> Token:
        return Token(TokenType.ERROR, message, position)

    # Состояния

    def _lex_path(self):
        """Точка входа и состояние между литералами и выражениями."""
        if self._eof():
            yield self._emit(TokenType.EOF)
            return None

        c = self.template[self.pos]
        if c == "/":
            self.pos += 1
            yield self._emit(TokenType.SEPARATOR)
            return self._lex_path
        if c == "%":
            return self._lex_percent
        if c == "{":
            self.pos += 1
            yield self._emit(TokenType.LBRACE)
            return self._lex_begin_expr
        return self._lex_raw

    def _lex_raw(self):
        """Литеральный текст до следующего '/', '{' или '%'."""
        match = _RAW_STOP.search(self.template, self.pos)
        limit = match.start() if match else self.length

        while self.pos < limit:
            c = self.template[self.pos]
            if c <= " " or c in _ILLEGAL_RAW or _BAD_SURROGATE.match(c):
                yield self._error(error_illegal(c), self.pos)
                return None
            self.pos += 1

        yield self._emit(TokenType.RAW)
        return self._lex_path

    def _lex_percent(self):
        """%XX: раскодированный байт уходит в поток как RAW."""
        digits = self.template[self.pos + 1:self.pos + 3]
        if len(digits) < 2:
            yield self._error(error_unfinished_percent(), self.pos)
            return None

        for offset, c in enumerate(digits, start=1):
            if c not in _HEXDIGITS:
                yield self._error(error_illegal_percent(c), self.pos + offset)
                return None

        self.pos += 3
        # байты >= 0x80 переносятся как суррогаты, парсер собирает из них текст
        decoded = bytes([int(digits, 16)]).decode("utf-8", "surrogateescape")
        yield self._emit_value(TokenType.RAW, decoded)
        return self._lex_path

    def _lex_begin_expr(self):
        """Сразу после '{': имя переменной или оператор."""
        if self._eof():
            yield self._error(error_unfinished_expr(), self.pos)
            return None

        c = self.template[self.pos]
        if c == "}":
            yield self._error(error_empty_expr(), self.pos)
            return None
        if c in VARCHARS:
            return self._lex_in_expr
        if c in OPERATORS:
            self.pos += 1
            yield self._emit(TokenType.OPERATOR)
            return self._lex_in_expr
        if c in RESERVED_OPERATORS:
            yield self._error(error_reserved_op(c), self.pos)
            return None
        yield self._error(error_unexpected(c), self.pos)
        return None

    def _lex_in_expr(self):
        """Элементы выражения вплоть до '}'."""
        while True:
            if self._eof():
                yield self._error(error_unfinished_expr(), self.pos)
                return None

            c = self.template[self.pos]
            if c == "}":
                self.pos += 1
                yield self._emit(TokenType.RBRACE)
                return self._lex_path
            elif c == ".":
                self.pos += 1
                yield self._emit(TokenType.DOT)
            elif c == ",":
                self.pos += 1
                yield self._emit(TokenType.COMMA)
            elif c in VARCHARS:
                while not self._eof() and self.template[self.pos] in VARCHARS:
                    self.pos += 1
                yield self._emit(TokenType.VARIABLE)
            elif c == "*":
                self.pos += 1
                yield self._emit(TokenType.EXPLODE)
            elif c == ":":
                self.pos += 1
                yield self._emit(TokenType.PREFIX)
                return self._lex_length
            else:
                yield self._error(error_unexpected(c), self.pos)
                return None

    def _lex_length(self):
        """Не более четырёх цифр длины префикса; пятая достаётся IN_EXPR."""
        while (
            not self._eof()
            and self.pos - self.start < _MAX_LENGTH_DIGITS
            and self.template[self.pos] in _DIGITS
        ):
            self.pos += 1

        if self.pos == self.start:
            yield self._error(error_expected_length(), self.pos)
            return None

        yield self._emit(TokenType.LENGTH)
        return self._lex_in_expr


def lex(template: str) -> TemplateLexer:
    """Ленивый поток токенов шаблона."""
    return TemplateLexer(template)


__all__ = [
    "TemplateLexer",
    "lex",
    "describe_char",
    "VARCHARS",
    "OPERATORS",
    "RESERVED_OPERATORS",
]
