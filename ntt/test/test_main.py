import json

import pytest

from ntt.__main__ import main
from ntt.constants import MOD


def test_multiply(capsys):
    assert main(["multiply", "1,2,3", "4,5,6"]) == 0
    assert capsys.readouterr().out == "4 13 28 27 18\n"


def test_multiply_circular_json(capsys):
    assert main(["--json", "multiply", "--circular", "1,2,3", "4,5,6"]) == 0
    # indices wrap modulo 4
    assert json.loads(capsys.readouterr().out) == [4 + 18, 13, 28, 27]


def test_power(capsys):
    main(["power", "1,1", "4"])
    assert capsys.readouterr().out == "1 4 6 4 1\n"

    main(["power", "5,6,7", "0"])
    assert capsys.readouterr().out == "1\n"


def test_multiply_all(capsys):
    main(["--json", "multiply-all", "1,1", "1,2", "1,3"])
    assert json.loads(capsys.readouterr().out) == [1, 6, 11, 6]


def test_modulus_and_cutoff(capsys):
    main(["--modulus", "17", "--cutoff", "0", "multiply", "4,5", "4,5"])
    assert capsys.readouterr().out == "16 6 8\n"

    main(["multiply", str(MOD + 2), "3"])
    assert capsys.readouterr().out == "6\n"


def test_verbose(capsys):
    main(["--verbose", "multiply", "1,2", "3"])
    out = capsys.readouterr().out.splitlines()
    assert out == ["brute force multiply 2 x 1", "3 6"]


@pytest.mark.parametrize(
    "argv",
    [
        ["multiply", "1,x", "2"],
        ["--modulus", "15", "multiply", "1", "2"],
        ["power", "1,1", "-1"],
        ["frobnicate", "1"],
    ],
)
def test_usage_errors(argv):
    with pytest.raises(SystemExit) as e:
        main(argv)
    assert e.value.code == 2
