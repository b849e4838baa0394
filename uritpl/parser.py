"""
Парсер шаблонов URI.

Второй конечный автомат поверх потока токенов лексера. Состояния:

    RAW        → литералы, разделители '/', начало выражения '{', EOF
    MAYBE_OP   → необязательный оператор сразу после '{'
    EXPR       → ожидается имя переменной (после '{', оператора, ',' или '.')
    AFTER_VAR  → после имени: '.', ',', ':', '*' или '}'
    LENGTH     → длина префикса после ':'

Грамматика выражения:
expression → "{" [operator] variable ("," variable)* "}"
variable   → name ("." name)* [":" length | "*"]
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, List, NoReturn, Optional

from .errors import (
    DoubleModifierError,
    ExpectedVariableError,
    LengthOver9999Error,
    LexError,
    UnexpectedAfterVariableError,
)
from .lexer import TemplateLexer
from .model import (
    EXPLODE,
    SEPARATOR,
    AnyPart,
    Ast,
    Expression,
    Literal,
    Modifier,
    Operator,
    PartType,
    Prefix,
    VarRef,
)
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


class ParserState(enum.Enum):
    RAW = "RAW"
    MAYBE_OP = "MAYBE_OP"
    EXPR = "EXPR"
    AFTER_VAR = "AFTER_VAR"
    LENGTH = "LENGTH"


class TemplateParser:
    """
    Парсер шаблонов URI.

    Экземпляр можно переиспользовать: всё рабочее состояние
    сбрасывается в начале каждого вызова parse().
    """

    def __init__(self):
        self._handlers: Dict[ParserState, Callable[[Token], ParserState]] = {
            ParserState.RAW: self._parse_raw,
            ParserState.MAYBE_OP: self._parse_maybe_op,
            ParserState.EXPR: self._parse_expr,
            ParserState.AFTER_VAR: self._parse_after_var,
            ParserState.LENGTH: self._parse_length,
        }
        self._reset("")

    def parse(self, template: str) -> Ast:
        """
        Разбирает шаблон в Ast.

        Args:
            template: Строка шаблона URI

        Returns:
            Неизменяемое дерево шаблона

        Raises:
            LexError: При лексической ошибке
            ParseError: При синтаксической ошибке
        """
        self._reset(template)
        state = ParserState.RAW

        for token in TemplateLexer(template):
            if token.type == TokenType.ERROR:
                raise LexError(token.value, token.position, template)
            if token.type == TokenType.EOF and state == ParserState.RAW:
                self._flush_literal()
                ast = Ast(tuple(self._parts))
                logger.debug(f"Parsed template into {len(ast.parts)} parts, variables: {ast.variable_names()}")
                return ast
            state = self._handlers[state](token)

        # Лексер всегда завершает поток токеном EOF или ERROR
        raise AssertionError(f"token stream ended without EOF in state {state.name}")

    def _reset(self, template: str) -> None:
        self._template = template
        self._parts: List[AnyPart] = []
        self._literal: List[str] = []
        self._operator = Operator.SIMPLE
        self._variables: List[VarRef] = []
        self._path: List[str] = []
        self._modifier: Optional[Modifier] = None
        self._length_digits = 0

    # Состояния

    def _parse_raw(self, token: Token) -> ParserState:
        if token.type == TokenType.RAW:
            self._literal.append(token.value)
            return ParserState.RAW

        if token.type == TokenType.SEPARATOR:
            self._flush_literal()
            if not self._parts or self._parts[-1].get_type() != PartType.SEPARATOR:
                self._parts.append(SEPARATOR)
            return ParserState.RAW

        if token.type == TokenType.LBRACE:
            self._flush_literal()
            self._operator = Operator.SIMPLE
            self._variables = []
            self._start_variable()
            return ParserState.MAYBE_OP

        self._unreachable(ParserState.RAW, token)

    def _parse_maybe_op(self, token: Token) -> ParserState:
        if token.type == TokenType.OPERATOR:
            self._operator = Operator(token.value)
            return ParserState.EXPR
        return self._parse_expr(token)

    def _parse_expr(self, token: Token) -> ParserState:
        if token.type == TokenType.VARIABLE:
            self._path.append(token.value)
            return ParserState.AFTER_VAR

        if token.type in (TokenType.COMMA, TokenType.DOT, TokenType.RBRACE):
            raise ExpectedVariableError(token.position, self._template)

        self._unreachable(ParserState.EXPR, token)

    def _parse_after_var(self, token: Token) -> ParserState:
        if token.type == TokenType.RBRACE:
            self._close_variable()
            self._parts.append(Expression(self._operator, tuple(self._variables)))
            return ParserState.RAW

        if token.type == TokenType.DOT:
            # Модификатор завершает имя переменной
            if self._modifier is not None:
                raise UnexpectedAfterVariableError(token.position, self._template)
            return ParserState.EXPR

        if token.type == TokenType.COMMA:
            self._close_variable()
            return ParserState.EXPR

        if token.type == TokenType.PREFIX:
            if self._modifier is not None:
                raise DoubleModifierError(token.position, self._template)
            return ParserState.LENGTH

        if token.type == TokenType.EXPLODE:
            if self._modifier is not None:
                raise DoubleModifierError(token.position, self._template)
            self._modifier = EXPLODE
            return ParserState.AFTER_VAR

        if token.type == TokenType.VARIABLE:
            # Лексер отдаёт не больше четырёх цифр длины, остаток приходит как имя
            if isinstance(self._modifier, Prefix) and token.value[0].isdigit():
                raise LengthOver9999Error(token.position - self._length_digits, self._template)
            raise UnexpectedAfterVariableError(token.position, self._template)

        self._unreachable(ParserState.AFTER_VAR, token)

    def _parse_length(self, token: Token) -> ParserState:
        if token.type == TokenType.LENGTH:
            self._modifier = Prefix(int(token.value))
            self._length_digits = len(token.value)
            return ParserState.AFTER_VAR

        self._unreachable(ParserState.LENGTH, token)

    # Вспомогательные методы

    def _flush_literal(self) -> None:
        if not self._literal:
            return
        raw = "".join(self._literal)
        # склеиваем раскодированные %XX байты обратно в UTF-8 текст
        text = raw.encode("utf-8", "surrogateescape").decode("utf-8", "surrogateescape")
        self._parts.append(Literal(text))
        self._literal = []

    def _start_variable(self) -> None:
        self._path = []
        self._modifier = None
        self._length_digits = 0

    def _close_variable(self) -> None:
        self._variables.append(VarRef(tuple(self._path), self._modifier))
        self._start_variable()

    def _unreachable(self, state: ParserState, token: Token) -> NoReturn:
        raise AssertionError(f"undefined state!\ncurrent state: {state.name}\ncurrent token: {token!r}")


def parse(template: str) -> Ast:
    """Удобная функция: разбор шаблона новым парсером."""
    return TemplateParser().parse(template)


__all__ = ["TemplateParser", "ParserState", "parse"]
