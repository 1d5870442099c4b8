"""
Type inference engine using the Hindley-Milner algorithm (Algorithm W)
"""

import logging
from typing import Dict, ItemsView, Iterator, Optional, Set, Tuple

from hmtype.ast.nodes import (
    Abstraction,
    Application,
    BoolLiteral,
    Expression,
    IntLiteral,
    Let,
    Variable,
)
from hmtype.errors import TypeInferenceError
from hmtype.typechecker.types import (
    BOOL_TYPE,
    INT_TYPE,
    FreshVarGenerator,
    Mono,
    PolyType,
    Type,
    TypeSubstitution,
    TypeVar,
    function_type,
    generalize,
)
from hmtype.typechecker.unify import UnificationError, unify

logger = logging.getLogger(__name__)

TypeBindings = Dict[str, PolyType]
InferenceResult = Tuple[TypeSubstitution, Type]


class TypeEnvironment:
    """Type environment mapping identifiers to polymorphic types."""

    def __init__(self, bindings: Optional[TypeBindings] = None) -> None:
        self.bindings: TypeBindings = bindings or {}

    def lookup(self, name: str) -> Optional[PolyType]:
        return self.bindings.get(name)

    def extend(self, name: str, scheme: PolyType) -> "TypeEnvironment":
        """Return a new environment with an additional binding."""
        new_bindings = self.bindings.copy()
        new_bindings[name] = scheme
        return TypeEnvironment(new_bindings)

    def apply_substitution(self, subst: TypeSubstitution) -> "TypeEnvironment":
        """Apply a type substitution to all bindings in the environment."""
        new_bindings = {}
        for name, scheme in self.bindings.items():
            new_bindings[name] = scheme.substitute(subst)
        return TypeEnvironment(new_bindings)

    def free_type_vars(self) -> Set[str]:
        """Return all free type variables in this environment."""
        free_vars = set()
        for scheme in self.bindings.values():
            free_vars.update(scheme.free_vars())
        return free_vars

    def generalize(self, typ: Type) -> PolyType:
        """Quantify over the variables of typ that this environment does not own."""
        return generalize(typ, self.free_type_vars())

    def items(self) -> ItemsView[str, PolyType]:
        return self.bindings.items()

    def __contains__(self, name: str) -> bool:
        return name in self.bindings

    def __getitem__(self, name: str) -> PolyType:
        return self.bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)


class UndefinedVariableError(TypeInferenceError):
    def __init__(self, name: str, node: Optional[Variable] = None) -> None:
        self.name = name
        super().__init__(f"Undefined variable: {name}", node)


class TypeInferrer:
    """Hindley-Milner type inference engine.

    Each inferrer owns its fresh variable generator, so independent requests
    should use independent inferrers (or call reset() between runs).
    """

    def __init__(self, fresh_var_gen: Optional[FreshVarGenerator] = None) -> None:
        self.fresh_var_gen = fresh_var_gen or FreshVarGenerator()

    def fresh_type_var(self) -> TypeVar:
        """Generate a fresh type variable."""
        return TypeVar(self.fresh_var_gen.fresh())

    def reset(self) -> None:
        """Restart fresh variable naming from t0."""
        self.fresh_var_gen.reset()

    def infer(self, env: TypeEnvironment, expr: Expression) -> InferenceResult:
        """Infer the type of an expression (Algorithm W).

        Type variables free in env are reserved first, so fresh names never
        alias them.
        """
        self.fresh_var_gen.reserve(env.free_type_vars())
        return self._infer(env, expr)

    def _infer(self, env: TypeEnvironment, expr: Expression) -> InferenceResult:
        match expr:
            case IntLiteral():
                return TypeSubstitution.empty(), INT_TYPE
            case BoolLiteral():
                return TypeSubstitution.empty(), BOOL_TYPE
            case Variable(name=name):
                return self._infer_variable(name, env, expr)
            case Abstraction(parameter=parameter, body=body):
                return self._infer_abstraction(parameter, body, env)
            case Application(function=function, argument=argument):
                return self._infer_application(function, argument, env, expr)
            case Let(name=name, value=value, body=body):
                return self._infer_let(name, value, body, env)
            case _:
                raise TypeInferenceError(
                    f"Unsupported expression type: {type(expr).__name__}",
                    expr,
                )

    def infer_scheme(self, env: TypeEnvironment, expr: Expression) -> PolyType:
        """Infer the type of an expression and close it over the environment."""
        subst, typ = self.infer(env, expr)
        return env.apply_substitution(subst).generalize(typ)

    def _infer_variable(
        self,
        name: str,
        env: TypeEnvironment,
        node: Variable,
    ) -> InferenceResult:
        scheme = env.lookup(name)
        if scheme is None:
            raise UndefinedVariableError(name, node)
        typ = scheme.instantiate(self.fresh_var_gen)
        logger.debug("instantiate %s : %s as %s", name, scheme, typ)
        return TypeSubstitution.empty(), typ

    def _infer_abstraction(
        self,
        parameter: str,
        body: Expression,
        env: TypeEnvironment,
    ) -> InferenceResult:
        param_type = self.fresh_type_var()
        body_env = env.extend(parameter, Mono(param_type))
        body_subst, body_type = self._infer(body_env, body)
        result_type = body_subst.apply(function_type(param_type, body_type))
        return body_subst, result_type

    def _infer_application(
        self,
        function: Expression,
        argument: Expression,
        env: TypeEnvironment,
        node: Application,
    ) -> InferenceResult:
        s1, func_type = self._infer(env, function)
        s2, arg_type = self._infer(env.apply_substitution(s1), argument)
        result_type = self.fresh_type_var()

        try:
            s3 = unify(s2.apply(func_type), function_type(arg_type, result_type))
        except UnificationError as e:
            raise e.with_context(f"in application {node}")

        logger.debug("application %s : %s", node, s3.apply(result_type))
        return s1.compose(s2.compose(s3)), s3.apply(result_type)

    def _infer_let(
        self,
        name: str,
        value: Expression,
        body: Expression,
        env: TypeEnvironment,
    ) -> InferenceResult:
        s1, value_type = self._infer(env, value)
        value_env = env.apply_substitution(s1)
        scheme = value_env.generalize(value_type)
        logger.debug("let %s : %s", name, scheme)

        s2, body_type = self._infer(value_env.extend(name, scheme), body)
        return s1.compose(s2), body_type


def infer(
    env: TypeEnvironment,
    expr: Expression,
    fresh_var_gen: Optional[FreshVarGenerator] = None,
) -> InferenceResult:
    """Run Algorithm W with a dedicated fresh variable generator."""
    return TypeInferrer(fresh_var_gen).infer(env, expr)
