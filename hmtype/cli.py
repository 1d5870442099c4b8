import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from hmtype.errors import HMTypeError, ParseError
from hmtype.parser.parser import parse
from hmtype.typechecker.infer import TypeEnvironment, TypeInferrer
from hmtype.typechecker.typecheck import default_environment, infer_scheme, infer_type

SYNTAX = "syntax: e ::= x | (e1 e2) | (\\x -> e) | (let x = e1 in e2)"

app = typer.Typer(pretty_exceptions_enable=False)
console = Console(highlight=False, soft_wrap=True)

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True))],
    )


def _load_environment(prelude: Optional[Path], no_prelude: bool) -> TypeEnvironment:
    if no_prelude:
        return TypeEnvironment()
    env = default_environment(prelude)
    logger.debug("loaded %d bindings from %s", len(env), prelude or "default prelude")
    return env


def _report(error: HMTypeError) -> None:
    kind = "Syntax Error" if isinstance(error, ParseError) else "Type Error"
    console.print(f"{kind}: {error}", style="bold red", markup=False)


def _infer_str(source: Any, env: TypeEnvironment, inferrer: TypeInferrer, scheme: bool) -> str:
    if scheme:
        return str(infer_scheme(source, env, inferrer))
    return str(infer_type(source, env, inferrer))


PRELUDE_OPTION = typer.Option(
    None,
    "--prelude",
    "-p",
    exists=True,
    dir_okay=False,
    envvar="HMTYPE_PRELUDE",
    help="Path to a prelude file with `val name : type` signatures",
)
NO_PRELUDE_OPTION = typer.Option(
    False,
    "--no-prelude",
    help="Start from an empty context",
)
SCHEME_OPTION = typer.Option(
    False,
    "--scheme/--mono",
    help="Print the generalized type instead of the raw monotype",
)
DEBUG_OPTION = typer.Option(
    False,
    "--debug",
    envvar="HMTYPE_DEBUG",
    help="Log inference steps",
)


@app.command()
def infer(
    expression: str = typer.Argument(..., help="Expression to type"),
    prelude: Optional[Path] = PRELUDE_OPTION,
    no_prelude: bool = NO_PRELUDE_OPTION,
    scheme: bool = SCHEME_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Infer the type of an expression"""
    _configure_logging(debug)
    env = _load_environment(prelude, no_prelude)
    try:
        console.print(_infer_str(expression, env, TypeInferrer(), scheme), markup=False)
    except HMTypeError as e:
        _report(e)
        raise typer.Exit(code=1)


@app.command()
def check(
    input_file: Path = typer.Argument(..., exists=True, help="Path to input file"),
    prelude: Optional[Path] = PRELUDE_OPTION,
    no_prelude: bool = NO_PRELUDE_OPTION,
    scheme: bool = SCHEME_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Type check the expression stored in a file"""
    _configure_logging(debug)
    env = _load_environment(prelude, no_prelude)
    try:
        result = _infer_str(parse(input_file), env, TypeInferrer(), scheme)
    except HMTypeError as e:
        _report(e)
        console.print("Type checking failed", style="bold red")
        raise typer.Exit(code=1)
    console.print(f"{input_file} :: {result}", markup=False)
    console.print("Type checking succeeded", style="bold green")


@app.command()
def context(
    prelude: Optional[Path] = PRELUDE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Print the bindings of the initial context"""
    _configure_logging(debug)
    env = _load_environment(prelude, False)
    for name, poly in sorted(env.items()):
        console.print(f"{name}: {poly}", markup=False)


@app.command()
def repl(
    prelude: Optional[Path] = PRELUDE_OPTION,
    no_prelude: bool = NO_PRELUDE_OPTION,
    scheme: bool = SCHEME_OPTION,
    keep_counter: bool = typer.Option(
        False,
        "--keep-counter",
        help="Keep numbering type variables across inputs",
    ),
    debug: bool = DEBUG_OPTION,
) -> None:
    """Read expressions line by line and print their types"""
    _configure_logging(debug)
    env = _load_environment(prelude, no_prelude)

    console.print(SYNTAX + "\n", markup=False)
    console.print("Run in Context: ")
    for name, poly in sorted(env.items()):
        console.print(f"{name}: {poly}", markup=False)
    console.print()

    inferrer = TypeInferrer()
    while True:
        try:
            source = console.input("> ")
        except EOFError:
            break
        if not source.strip():
            continue

        try:
            result = _infer_str(source, env, inferrer, scheme)
        except HMTypeError as e:
            _report(e)
        else:
            console.print(f"`{source}` infer as `{result}`", markup=False)
        finally:
            if not keep_counter:
                inferrer.reset()


def main() -> Any:
    return app()
