import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict

from lark import Lark, ParseTree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, VisitError

from hmtype.ast.nodes import Expression
from hmtype.ast.transformer import transform_parse_tree
from hmtype.errors import HMTypeError, ParseError
from hmtype.typechecker.types import PolyType

logger = logging.getLogger(__name__)

GRAMMAR = Path(__file__).parent / "hm.lark"
DEFAULT_PRELUDE = Path(__file__).parent.parent / "prelude" / "default.hm"


@lru_cache(maxsize=None)
def _parser() -> Lark:
    return Lark.open(
        str(GRAMMAR),
        parser="lalr",
        start=["expression", "prelude"],
    )


def parse_lark(text: str, start: str) -> ParseTree:
    try:
        return _parser().parse(text, start=start)
    except UnexpectedCharacters as e:
        raise ParseError(
            f"Unexpected character {e.char!r}",
            e.line,
            e.column,
        ) from e
    except UnexpectedInput as e:
        token = getattr(e, "token", None)
        if token is None or token.type == "$END":
            line = text.count("\n") + 1
            column = len(text.rsplit("\n", 1)[-1]) + 1
            raise ParseError("Unexpected end of input", line, column) from e
        raise ParseError(f"Unexpected token {str(token)!r}", e.line, e.column) from e


def _transform(tree: ParseTree):
    try:
        return transform_parse_tree(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, HMTypeError):
            raise e.orig_exc from None
        raise


def parse_expression(text: str) -> Expression:
    """Parse a single expression from source text."""
    expr = _transform(parse_lark(text, "expression"))
    logger.debug("parsed expression %s", expr)
    return expr


def parse(path: Path) -> Expression:
    with open(path) as f:
        return parse_expression(f.read())


def parse_prelude(text: str) -> Dict[str, PolyType]:
    """Parse `val name : type` signatures into polymorphic bindings."""
    bindings = _transform(parse_lark(text, "prelude"))
    logger.debug("parsed %d prelude signatures", len(bindings))
    return bindings


def load_prelude(path: Path = DEFAULT_PRELUDE) -> Dict[str, PolyType]:
    with open(path) as f:
        return parse_prelude(f.read())
