"""
AST Transformer for converting Lark parse trees to custom AST nodes.

Expressions become nodes from hmtype.ast.nodes, prelude signatures become
polymorphic types from hmtype.typechecker.types.
"""

from typing import Any, Dict, List, Tuple

from lark import Token, Transformer, Tree

from hmtype.ast.nodes import (
    Abstraction,
    Application,
    BoolLiteral,
    Expression,
    IntLiteral,
    Let,
    Variable,
)
from hmtype.errors import ParseError
from hmtype.typechecker.types import (
    Mono,
    PolyType,
    Type,
    TypeApp,
    TypeVar,
    forall,
    function_type,
)

Signature = Tuple[str, PolyType]


def _is_type_variable(name: str) -> bool:
    return name[0].islower()


class ASTTransformer(Transformer):
    """Transformer that converts Lark parse trees to custom AST nodes."""

    # Literals
    def int(self, items: List[Any]) -> IntLiteral:
        return IntLiteral(int(items[0]))

    def true(self, items: List[Any]) -> BoolLiteral:
        return BoolLiteral(True)

    def false(self, items: List[Any]) -> BoolLiteral:
        return BoolLiteral(False)

    # Variables
    def var(self, items: List[Any]) -> Variable:
        return Variable(str(items[0]))

    def app(self, items: List[Any]) -> Application:
        function, argument = items
        return Application(function, argument)

    def abs(self, items: List[Any]) -> Abstraction:
        parameter, body = items
        return Abstraction(str(parameter), body)

    def let(self, items: List[Any]) -> Let:
        name, value, body = items
        return Let(str(name), value, body)

    def expression(self, items: List[Any]) -> Expression:
        return items[0]

    # Types
    def type_name(self, items: List[Any]) -> Type:
        name = str(items[0])
        if _is_type_variable(name):
            return TypeVar(name)
        return TypeApp(name)

    def type_ctor(self, items: List[Any]) -> Type:
        head: Token = items[0]
        if _is_type_variable(head):
            raise ParseError(
                f"Type variable '{head}' cannot be applied to arguments",
                head.line,
                head.column,
            )
        return TypeApp(str(head), tuple(items[1:]))

    def arrow(self, items: List[Any]) -> Type:
        param, result = items
        return function_type(param, result)

    # Schemes
    def mono(self, items: List[Any]) -> PolyType:
        return Mono(items[0])

    def forall(self, items: List[Any]) -> PolyType:
        *names, typ = items
        for name in names:
            if not _is_type_variable(name):
                raise ParseError(
                    f"Cannot quantify over type constructor '{name}'",
                    name.line,
                    name.column,
                )
        return forall([str(name) for name in names], typ)

    def signature(self, items: List[Any]) -> Signature:
        name, scheme = items
        return str(name), scheme

    def prelude(self, items: List[Signature]) -> Dict[str, PolyType]:
        bindings: Dict[str, PolyType] = {}
        for name, scheme in items:
            if name in bindings:
                raise ParseError(f"Duplicate signature for '{name}'")
            bindings[name] = scheme
        return bindings


def transform_parse_tree(tree: Tree) -> Any:
    """
    Transform a Lark parse tree into a custom AST.
    """
    transformer = ASTTransformer()
    return transformer.transform(tree)
