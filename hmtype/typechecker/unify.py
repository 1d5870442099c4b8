"""
Unification algorithm for the Hindley-Milner type system
"""

import logging

from hmtype.errors import TypeInferenceError
from hmtype.typechecker.types import Type, TypeApp, TypeSubstitution, TypeVar

logger = logging.getLogger(__name__)


class UnificationError(TypeInferenceError):
    pass


class MismatchedConstructorError(UnificationError):
    def __init__(self, name1: str, name2: str) -> None:
        self.name1 = name1
        self.name2 = name2
        super().__init__(
            f"Could not unify types (different type constructors): {name1} and {name2}",
        )


class MismatchedArityError(UnificationError):
    def __init__(self, type1: TypeApp, type2: TypeApp) -> None:
        self.type1 = type1
        self.type2 = type2
        super().__init__(
            f"Could not unify types (different argument counts): "
            f"{type1.name}/{len(type1.args)} and {type2.name}/{len(type2.args)}",
        )


class InfiniteTypeError(UnificationError):
    def __init__(self, variable: str, typ: Type) -> None:
        self.variable = variable
        self.type = typ
        super().__init__(f"Infinite type: {variable} occurs in {_safe_str(typ)}")


def _safe_str(typ: Type) -> str:
    try:
        return str(typ)
    except ValueError:
        return repr(typ)


def occurs_check(var: str, typ: Type) -> bool:
    """Check if a type variable occurs within a type (prevents infinite types)"""
    match typ:
        case TypeVar(name=name):
            return var == name
        case TypeApp(args=args):
            return any(occurs_check(var, arg) for arg in args)
        case _:
            raise UnificationError(f"Unknown type in occurs check: {type(typ)}")


def bind(var: str, typ: Type) -> TypeSubstitution:
    """Bind a type variable to a type after the occurs check"""
    if occurs_check(var, typ):
        raise InfiniteTypeError(var, typ)
    return TypeSubstitution({var: typ})


def unify(t1: Type, t2: Type) -> TypeSubstitution:
    """Unify two types and return the most general unifier"""
    logger.debug("unify %r with %r", t1, t2)

    match t1, t2:
        case TypeVar(name=name1), TypeVar(name=name2) if name1 == name2:
            return TypeSubstitution.empty()

        case TypeVar(name=name), _:
            return bind(name, t2)

        case _, TypeVar(name=name):
            return bind(name, t1)

        case TypeApp(), TypeApp():
            if t1.name != t2.name:
                raise MismatchedConstructorError(t1.name, t2.name)
            if len(t1.args) != len(t2.args):
                raise MismatchedArityError(t1, t2)

            subst = TypeSubstitution.empty()
            for arg1, arg2 in zip(t1.args, t2.args):
                s = unify(subst.apply(arg1), subst.apply(arg2))
                subst = subst.compose(s)

            return subst

    # No other cases match
    raise UnificationError(f"Cannot unify {t1!r} and {t2!r}")
