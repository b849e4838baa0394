"""
Раскрытие шаблонов URI по RFC 6570.

    >>> from uritpl import parse, execute
    >>> ast = parse("/hello/{name}")
    >>> execute(ast, {"name": "Gontrand"})
    '/hello/Gontrand'
"""

from __future__ import annotations

from .errors import (
    DoubleModifierError,
    ExecutionError,
    ExpectedVariableError,
    LengthOver9999Error,
    LexError,
    ParseError,
    UnexpectedAfterVariableError,
    UriTemplateError,
)
from .escape import Mask, escape
from .executor import Sink, TemplateExecutor, execute, expand
from .lexer import TemplateLexer, lex
from .logs import setup_logging_once
from .model import (
    EXPLODE,
    Ast,
    Explode,
    Expression,
    Literal,
    Operator,
    PathSeparator,
    Prefix,
    VarRef,
)
from .parser import TemplateParser, parse
from .tokens import Token, TokenType
from .values import URI_NAME, Value, ValueKind
from .version import tool_version

setup_logging_once()

__all__ = [
    # Pipeline
    "parse", "execute", "expand", "escape", "lex",
    "TemplateLexer", "TemplateParser", "TemplateExecutor", "Sink",
    "Mask", "Token", "TokenType",

    # Model
    "Ast", "Expression", "Literal", "PathSeparator", "Operator",
    "VarRef", "Prefix", "Explode", "EXPLODE",

    # Data
    "Value", "ValueKind", "URI_NAME",

    # Errors
    "UriTemplateError", "ParseError", "LexError", "ExpectedVariableError",
    "DoubleModifierError", "UnexpectedAfterVariableError", "LengthOver9999Error",
    "ExecutionError",

    "tool_version",
]
