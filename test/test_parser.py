import pytest

from hmtype.ast.nodes import (
    Abstraction,
    Application,
    BoolLiteral,
    IntLiteral,
    Let,
    Variable,
)
from hmtype.errors import ParseError
from hmtype.parser.parser import load_prelude, parse, parse_expression, parse_prelude
from hmtype.typechecker.types import (
    INT_TYPE,
    Mono,
    Quantifier,
    TypeApp,
    TypeVar,
    function_type,
)

a = TypeVar("a")
b = TypeVar("b")


@pytest.mark.parametrize(
    "source, expected",
    [
        ("10", IntLiteral(10)),
        ("true", BoolLiteral(True)),
        ("false", BoolLiteral(False)),
        ("x", Variable("x")),
        ("letter", Variable("letter")),
        ("x_1", Variable("x_1")),
        ("(f x)", Application(Variable("f"), Variable("x"))),
        (r"(\x -> x)", Abstraction("x", Variable("x"))),
        (
            "(let x = 10 in (inc x))",
            Let("x", IntLiteral(10), Application(Variable("inc"), Variable("x"))),
        ),
        (
            r"((\x -> x) (let y = true in y))",
            Application(
                Abstraction("x", Variable("x")),
                Let("y", BoolLiteral(True), Variable("y")),
            ),
        ),
    ],
)
def test_parse_expression(source, expected):
    assert parse_expression(source) == expected


def test_parse_ignores_comments_and_newlines():
    source = "-- the identity\n(\\x ->\n  x) -- trailing\n"
    assert parse_expression(source) == Abstraction("x", Variable("x"))


@pytest.mark.parametrize(
    "source",
    [r"(\x -> 10)", "(let const = (\\y -> true) in const)", "((add 1) 2)"],
)
def test_printed_expression_parses_back(source):
    assert str(parse_expression(source)) == source


def test_parse_error_reports_location():
    with pytest.raises(ParseError) as excinfo:
        parse_expression(r"(\x x)")
    assert (excinfo.value.line, excinfo.value.column) == (1, 5)
    assert "1:5" in str(excinfo.value)


def test_parse_error_on_second_line():
    with pytest.raises(ParseError) as excinfo:
        parse_expression("(let x = 10\n  on x)")
    assert excinfo.value.line == 2


@pytest.mark.parametrize(
    "source",
    ["", "(f x y)", r"(\x -> x", "(let = 1 in 2)", "@", "(10)"],
)
def test_syntax_errors(source):
    with pytest.raises(ParseError):
        parse_expression(source)


def test_parse_file(tmp_path):
    path = tmp_path / "id.hm"
    path.write_text("-- comment\n(\\x -> x)\n")
    assert parse(path) == Abstraction("x", Variable("x"))


def test_parse_prelude():
    bindings = parse_prelude(
        """
        val id : forall a. a -> a
        val const : ∀a b. a -> b -> a
        val size : Map (List a) b -> Int
        """,
    )
    assert bindings["id"] == Quantifier("a", Mono(function_type(a, a)))
    assert bindings["const"] == Quantifier(
        "a",
        Quantifier("b", Mono(function_type(a, function_type(b, a)))),
    )
    assert bindings["size"] == Mono(
        function_type(TypeApp("Map", (TypeApp("List", (a,)), b)), INT_TYPE),
    )


def test_parse_empty_prelude():
    assert parse_prelude("-- nothing here\n") == {}


def test_prelude_rejects_duplicates():
    with pytest.raises(ParseError):
        parse_prelude("val inc : Int -> Int\nval inc : Int")


@pytest.mark.parametrize(
    "source",
    ["val bad : forall A. A", "val bad : f Int", "val bad Int"],
)
def test_prelude_errors(source):
    with pytest.raises(ParseError):
        parse_prelude(source)


def test_default_prelude():
    bindings = {name: str(poly) for name, poly in load_prelude().items()}
    assert bindings == {
        "list": "∀a.a -> List a",
        "inc": "Int -> Int",
        "dec": "Int -> Int",
        "isNull": "∀a.a -> Bool",
        "add": "Int -> Int -> Int",
    }


@pytest.mark.parametrize(
    "source, location",
    [("(x", (1, 3)), ("", (1, 1)), ("(let x = 10\n", (2, 1))],
)
def test_end_of_input_reports_location(source, location):
    with pytest.raises(ParseError) as excinfo:
        parse_expression(source)
    assert (excinfo.value.line, excinfo.value.column) == location
    assert "end of input" in str(excinfo.value)
