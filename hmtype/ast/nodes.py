from abc import ABC
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ASTNode(ABC):
    pass


# Literals
@dataclass(frozen=True)
class IntLiteral(ASTNode):
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BoolLiteral(ASTNode):
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


# Variables
@dataclass(frozen=True)
class Variable(ASTNode):
    name: str

    def __str__(self) -> str:
        return self.name


# Functions
@dataclass(frozen=True)
class Application(ASTNode):
    function: "Expression"
    argument: "Expression"

    def __str__(self) -> str:
        return f"({self.function} {self.argument})"


@dataclass(frozen=True)
class Abstraction(ASTNode):
    parameter: str
    body: "Expression"

    def __str__(self) -> str:
        return f"(\\{self.parameter} -> {self.body})"


# Bindings
@dataclass(frozen=True)
class Let(ASTNode):
    name: str
    value: "Expression"
    body: "Expression"

    def __str__(self) -> str:
        return f"(let {self.name} = {self.value} in {self.body})"


Literal = Union[IntLiteral, BoolLiteral]

Expression = Union[
    IntLiteral,
    BoolLiteral,
    Variable,
    Application,
    Abstraction,
    Let,
]
