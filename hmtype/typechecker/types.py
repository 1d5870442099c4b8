"""
Type representations for the Hindley-Milner type system
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple, Union

ARROW = "->"


class Type(ABC):
    """Base class for all monomorphic types"""

    @abstractmethod
    def free_vars(self) -> Set[str]:
        """Return the set of free type variables in this type"""
        pass

    @abstractmethod
    def ordered_vars(self) -> List[str]:
        """Return the type variables in order of first occurrence"""
        pass

    @abstractmethod
    def substitute(self, subst: Dict[str, "Type"]) -> "Type":
        """Apply a substitution to this type"""
        pass

    def apply_substitution(self, subst: "TypeSubstitution") -> "Type":
        """Apply a TypeSubstitution to this type"""
        return self.substitute(subst.mapping)

    @abstractmethod
    def __str__(self) -> str:
        pass


@dataclass(frozen=True)
class TypeVar(Type):
    """Type variable (e.g., 'a', 't0')"""

    name: str

    def free_vars(self) -> Set[str]:
        return {self.name}

    def ordered_vars(self) -> List[str]:
        return [self.name]

    def substitute(self, subst: Dict[str, Type]) -> Type:
        return subst.get(self.name, self)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TypeApp(Type):
    """Type constructor applied to arguments (e.g., Int, List a, a -> b)"""

    name: str
    args: Tuple[Type, ...] = ()

    def free_vars(self) -> Set[str]:
        result: Set[str] = set()
        for arg in self.args:
            result |= arg.free_vars()
        return result

    def ordered_vars(self) -> List[str]:
        result: List[str] = []
        for arg in self.args:
            for var in arg.ordered_vars():
                if var not in result:
                    result.append(var)
        return result

    def substitute(self, subst: Dict[str, Type]) -> Type:
        if not self.args:
            return self
        return TypeApp(self.name, tuple(arg.substitute(subst) for arg in self.args))

    def is_function(self) -> bool:
        return self.name == ARROW

    def __str__(self) -> str:
        if self.is_function():
            if len(self.args) != 2:
                raise ValueError(
                    f"expected 2 arguments for `{ARROW}` but got {len(self.args)}",
                )
            # Walk the right spine so long chains do not recurse
            parts = []
            typ: Type = self
            while isinstance(typ, TypeApp) and typ.is_function() and len(typ.args) == 2:
                param, typ = typ.args
                if isinstance(param, TypeApp) and param.is_function():
                    parts.append(f"({param})")
                else:
                    parts.append(str(param))
            parts.append(str(typ))
            return f" {ARROW} ".join(parts)

        if not self.args:
            return self.name
        args_str = " ".join(_atom_str(arg) for arg in self.args)
        return f"{self.name} {args_str}"


def _atom_str(typ: Type) -> str:
    if isinstance(typ, TypeApp) and typ.args:
        return f"({typ})"
    return str(typ)


def function_type(param: Type, result: Type) -> TypeApp:
    """Build the function type param -> result"""
    return TypeApp(ARROW, (param, result))


# Built-in types
INT_TYPE = TypeApp("Int")
BOOL_TYPE = TypeApp("Bool")


class PolyType(ABC):
    """Type closed under zero or more universal quantifiers"""

    @abstractmethod
    def free_vars(self) -> Set[str]:
        pass

    @abstractmethod
    def substitute(self, subst: "TypeSubstitution") -> "PolyType":
        pass

    def instantiate(self, fresh_var_gen: "FreshVarGenerator") -> Type:
        """Replace every quantified variable with a fresh type variable"""
        mapping: Dict[str, Type] = {}
        scheme: PolyType = self
        while isinstance(scheme, Quantifier):
            mapping[scheme.bound] = TypeVar(fresh_var_gen.fresh())
            scheme = scheme.body
        if not isinstance(scheme, Mono):
            raise TypeError(f"cannot instantiate {type(scheme).__name__}")
        return TypeSubstitution(mapping).apply(scheme.type)


@dataclass(frozen=True)
class Mono(PolyType):
    """Monomorphic type used where a polymorphic one is expected"""

    type: Type

    def free_vars(self) -> Set[str]:
        return self.type.free_vars()

    def substitute(self, subst: "TypeSubstitution") -> PolyType:
        return Mono(subst.apply(self.type))

    def __str__(self) -> str:
        return str(self.type)


@dataclass(frozen=True)
class Quantifier(PolyType):
    """Universal quantifier (∀ bound . body)"""

    bound: str
    body: PolyType

    def free_vars(self) -> Set[str]:
        return self.body.free_vars() - {self.bound}

    def substitute(self, subst: "TypeSubstitution") -> PolyType:
        """Apply substitution, being careful not to substitute the bound variable"""
        filtered = TypeSubstitution(
            {var: typ for var, typ in subst.mapping.items() if var != self.bound},
        )
        return Quantifier(self.bound, self.body.substitute(filtered))

    def __str__(self) -> str:
        return f"∀{self.bound}.{self.body}"


def forall(variables: List[str], typ: Type) -> PolyType:
    """Quantify over variables, the first one outermost"""
    scheme: PolyType = Mono(typ)
    for var in reversed(variables):
        scheme = Quantifier(var, scheme)
    return scheme


class TypeSubstitution:
    """Represents a type substitution (mapping from type variables to types)"""

    def __init__(self, mapping: Optional[Dict[str, Type]] = None):
        self.mapping = mapping or {}

    @classmethod
    def empty(cls) -> "TypeSubstitution":
        return cls()

    def apply(self, t: Union[Type, PolyType]) -> Union[Type, PolyType]:
        """Apply this substitution to a type or a polymorphic type"""
        match t:
            case Type():
                return t.substitute(self.mapping)
            case PolyType():
                return t.substitute(self)
            case _:
                raise TypeError(f"Cannot apply substitution to {type(t).__name__}")

    def compose(self, other: "TypeSubstitution") -> "TypeSubstitution":
        """Compose two substitutions: apply self first, then other

        apply(s1.compose(s2), t) == apply(s2, apply(s1, t))
        """
        new_mapping = {}

        # Apply other to all mappings in self
        for var, typ in self.mapping.items():
            new_mapping[var] = other.apply(typ)

        # Add mappings from other that aren't in self
        for var, typ in other.mapping.items():
            if var not in new_mapping:
                new_mapping[var] = typ

        return TypeSubstitution(new_mapping)

    def __len__(self) -> int:
        return len(self.mapping)

    def __str__(self) -> str:
        if not self.mapping:
            return "∅"
        items = [f"{var} ↦ {typ}" for var, typ in self.mapping.items()]
        return "{" + ", ".join(items) + "}"


class FreshVarGenerator:
    """Generates fresh type variables"""

    def __init__(self) -> None:
        self.counter = 0
        self.reserved: Set[str] = set()

    def reserve(self, names: Set[str]) -> None:
        """Never hand out names already free in the caller's context"""
        self.reserved |= names

    def fresh(self) -> str:
        """Generate a fresh type variable name"""
        name = f"t{self.counter}"
        self.counter += 1
        while name in self.reserved:
            name = f"t{self.counter}"
            self.counter += 1
        return name

    def reset(self) -> None:
        """Restart naming from t0; only safe between independent runs"""
        self.counter = 0
        self.reserved = set()


def generalize(typ: Type, type_env_free_vars: Set[str]) -> PolyType:
    """Generalize a type by quantifying over variables not free in the environment"""
    quantified = [var for var in typ.ordered_vars() if var not in type_env_free_vars]
    return forall(quantified, typ)
