"""
Entry points tying the parser, the prelude and the inference engine together.
"""

from pathlib import Path
from typing import Optional, Union

from hmtype.ast.nodes import Expression
from hmtype.parser.parser import DEFAULT_PRELUDE, load_prelude, parse_expression
from hmtype.typechecker.infer import TypeEnvironment, TypeInferrer
from hmtype.typechecker.types import PolyType, Type


def default_environment(prelude: Optional[Path] = None) -> TypeEnvironment:
    """Build the initial context from a prelude file (the packaged one by default)."""
    return TypeEnvironment(load_prelude(prelude or DEFAULT_PRELUDE))


def _as_expression(source: Union[str, Expression]) -> Expression:
    if isinstance(source, str):
        return parse_expression(source)
    return source


def infer_type(
    source: Union[str, Expression],
    env: Optional[TypeEnvironment] = None,
    inferrer: Optional[TypeInferrer] = None,
) -> Type:
    """Infer the monotype of an expression under env (empty by default)."""
    if env is None:
        env = TypeEnvironment()
    inferrer = inferrer or TypeInferrer()
    _, typ = inferrer.infer(env, _as_expression(source))
    return typ


def infer_scheme(
    source: Union[str, Expression],
    env: Optional[TypeEnvironment] = None,
    inferrer: Optional[TypeInferrer] = None,
) -> PolyType:
    """Infer the type of an expression generalized over env."""
    if env is None:
        env = TypeEnvironment()
    inferrer = inferrer or TypeInferrer()
    return inferrer.infer_scheme(env, _as_expression(source))
