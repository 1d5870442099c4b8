from typer.testing import CliRunner

from hmtype.cli import app

runner = CliRunner()


def test_infer():
    result = runner.invoke(app, ["infer", r"(\x -> x)"])
    assert result.exit_code == 0
    assert result.output.strip() == "t0 -> t0"


def test_infer_uses_default_prelude():
    result = runner.invoke(app, ["infer", "(list (inc 1))"])
    assert result.exit_code == 0
    assert result.output.strip() == "List Int"


def test_infer_without_prelude():
    result = runner.invoke(app, ["infer", "--no-prelude", "(inc 1)"])
    assert result.exit_code == 1
    assert "Type Error: Undefined variable: inc" in result.output


def test_infer_scheme():
    result = runner.invoke(
        app,
        ["infer", "--scheme", r"(let const = (\y -> true) in const)"],
    )
    assert result.exit_code == 0
    assert result.output.strip() == "∀t1.t1 -> Bool"


def test_infer_syntax_error():
    result = runner.invoke(app, ["infer", r"(\x x)"])
    assert result.exit_code == 1
    assert "Syntax Error" in result.output


def test_custom_prelude(tmp_path):
    prelude = tmp_path / "prelude.hm"
    prelude.write_text("val neg : Int -> Int\n")

    result = runner.invoke(app, ["infer", "--prelude", str(prelude), "(neg 1)"])
    assert result.output.strip() == "Int"

    result = runner.invoke(app, ["infer", "--prelude", str(prelude), "(inc 1)"])
    assert result.exit_code == 1


def test_prelude_from_environment(tmp_path):
    prelude = tmp_path / "prelude.hm"
    prelude.write_text("val yes : Bool\n")

    result = runner.invoke(app, ["infer", "yes"], env={"HMTYPE_PRELUDE": str(prelude)})
    assert result.exit_code == 0
    assert result.output.strip() == "Bool"


def test_context():
    result = runner.invoke(app, ["context"])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines == [
        "add: Int -> Int -> Int",
        "dec: Int -> Int",
        "inc: Int -> Int",
        "isNull: ∀a.a -> Bool",
        "list: ∀a.a -> List a",
    ]


def test_check(tmp_path):
    source = tmp_path / "program.hm"
    source.write_text("(isNull (list 1))\n")

    result = runner.invoke(app, ["check", str(source)])
    assert result.exit_code == 0
    assert ":: Bool" in result.output
    assert "Type checking succeeded" in result.output


def test_check_failure(tmp_path):
    source = tmp_path / "program.hm"
    source.write_text(r"(\x -> (x x))")

    result = runner.invoke(app, ["check", str(source)])
    assert result.exit_code == 1
    assert "Infinite type" in result.output
    assert "Type checking failed" in result.output


def test_repl_resets_counter_between_inputs():
    result = runner.invoke(app, ["repl"], input="(\\x -> x)\n(\\x -> x)\nfoo\n\n(\\x x)\n")
    assert result.exit_code == 0
    assert result.output.count(r"`(\x -> x)` infer as `t0 -> t0`") == 2
    assert "Type Error: Undefined variable: foo" in result.output
    assert "Syntax Error" in result.output
    assert "isNull: ∀a.a -> Bool" in result.output


def test_repl_keep_counter():
    result = runner.invoke(
        app,
        ["repl", "--keep-counter", "--no-prelude"],
        input="(\\x -> x)\n(\\x -> x)\n",
    )
    assert r"`(\x -> x)` infer as `t0 -> t0`" in result.output
    assert r"`(\x -> x)` infer as `t1 -> t1`" in result.output
