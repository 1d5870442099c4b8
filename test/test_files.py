from pathlib import Path
from typing import Any

import pytest

from hmtype.parser.parser import parse
from hmtype.typechecker.typecheck import default_environment, infer_type
from utility.file_tester import file_test_type, get_all_test_files

BASE_TEST_FILES_PATH = Path(__file__).parent / "files"


@pytest.mark.parametrize(
    "file_name",
    list(get_all_test_files(BASE_TEST_FILES_PATH, "hm")),
    ids=lambda p: p.name,
)
def test_inferred_type(file_name: Path) -> None:
    def run_type_check(f: Path) -> Any:
        return infer_type(parse(f), default_environment())

    file_test_type(file_name, run_type_check)
