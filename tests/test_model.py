"""
Тесты моделей разобранного шаблона.
"""

import dataclasses

import pytest

from tests.infrastructure import load_rfc_examples
from uritpl.escape import Mask
from uritpl.model import (
    EXPLODE,
    SEPARATOR,
    Ast,
    Expression,
    Literal,
    Operator,
    PartType,
    Prefix,
    VarRef,
)
from uritpl.parser import parse

_, RFC_EXAMPLES = load_rfc_examples()


class TestOperatorTable:

    @pytest.mark.parametrize("op,prefix,separator,named,mask,if_empty", [
        (Operator.SIMPLE, "", ",", False, Mask.DISALLOWED | Mask.RESERVED, "="),
        (Operator.RESERVED, "", ",", False, Mask.DISALLOWED, "="),
        (Operator.FRAGMENT, "#", ",", False, Mask.DISALLOWED, "="),
        (Operator.LABEL, ".", ".", False, Mask.DISALLOWED | Mask.RESERVED, "="),
        (Operator.PATH, "/", "/", False, Mask.DISALLOWED | Mask.RESERVED, "="),
        (Operator.PATH_PARAM, ";", ";", True, Mask.DISALLOWED | Mask.RESERVED, ""),
        (Operator.QUERY, "?", "&", True, Mask.DISALLOWED | Mask.RESERVED, "="),
        (Operator.CONTINUATION, "&", "&", True, Mask.DISALLOWED | Mask.RESERVED, "="),
    ])
    def test_rules(self, op, prefix, separator, named, mask, if_empty):
        assert op.prefix == prefix
        assert op.separator == separator
        assert op.named is named
        assert op.mask == mask
        assert op.if_empty == if_empty


class TestModifiers:

    def test_prefix_bounds(self):
        assert Prefix(0).length == 0
        assert Prefix(9999).length == 9999
        with pytest.raises(ValueError):
            Prefix(10000)
        with pytest.raises(ValueError):
            Prefix(-1)

    def test_varref(self):
        ref = VarRef(("person", "firstName"), Prefix(3))
        assert ref.root == "person"
        assert ref.name == "firstName"
        assert ref.prefix_length == 3
        assert not ref.explode
        assert str(ref) == "person.firstName:3"

    def test_varref_explode(self):
        ref = VarRef(("list",), EXPLODE)
        assert ref.explode
        assert ref.prefix_length is None
        assert str(ref) == "list*"

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            VarRef(())


class TestParts:

    def test_expression_to_string(self):
        expr = Expression(Operator.SIMPLE, (VarRef(("var",)),))
        assert str(expr) == "{var}"

    def test_expression_with_modifiers_to_string(self):
        expr = Expression(
            Operator.RESERVED,
            (VarRef(("var",)), VarRef(("prefix",), Prefix(12)), VarRef(("explode",), EXPLODE)),
        )
        assert str(expr) == "{+var,prefix:12,explode*}"

    def test_expression_needs_variables(self):
        with pytest.raises(ValueError):
            Expression(Operator.QUERY, ())

    def test_literal_to_string_escapes(self):
        assert str(Literal("a b/c")) == "a%20b%2Fc"
        assert str(Literal("it's {x} 100%")) == "it%27s%20%7Bx%7D%20100%25"
        assert str(Literal("café")) == "caf%C3%A9"

    def test_part_types(self):
        assert Literal("x").get_type() == PartType.LITERAL
        assert SEPARATOR.get_type() == PartType.SEPARATOR
        assert Expression(Operator.SIMPLE, (VarRef(("x",)),)).get_type() == PartType.EXPRESSION


class TestAst:

    def test_variables_are_derived(self):
        ast = Ast((
            Expression(Operator.SIMPLE, (VarRef(("a", "b")), VarRef(("c",)))),
            Literal("x"),
            Expression(Operator.QUERY, (VarRef(("a",)),)),
        ))
        assert ast.variables == {"a", "c"}
        assert ast.variable_names() == ["a", "c"]
        assert len(list(ast.expressions())) == 2

    def test_frozen(self):
        ast = parse("/a/{b}")
        with pytest.raises(dataclasses.FrozenInstanceError):
            ast.parts = ()

    @pytest.mark.parametrize("template", [
        "caf%C3%A9/x%2Fy{a}",
        "100%25",
        "%27quoted%27",
        "%FF/%7B%7D",
        "a//b/",
        "/hello{?person.firstName,person.lastName}",
    ])
    def test_to_template_round_trip(self, template):
        ast = parse(template)
        assert parse(ast.to_template()) == ast
        assert str(ast) == ast.to_template()

    @pytest.mark.parametrize("example", RFC_EXAMPLES, ids=lambda e: e.id)
    def test_rfc_templates_round_trip(self, example):
        ast = parse(example.template)
        assert parse(ast.to_template()) == ast

    def test_canonical_form(self):
        assert parse("a//b%2f{+x:03,y*}").to_template() == "a/b%2F{+x:3,y*}"
