"""
Tests for the command-line front end.
"""

import json

import pytest

from main import diagram_from_dict, main, result_to_dict
from catlim import limit


PULLBACK = {
    "V1": [3, 2],
    "V2": [2],
    "edges": [[0, 0, [0, 0, 1]], [1, 0, [0, 1]]],
}


@pytest.fixture
def diagram_file(tmp_path):
    path = tmp_path / "diagram.json"
    path.write_text(json.dumps(PULLBACK))
    return path


class TestDiagramFormat:
    def test_sizes(self):
        d = diagram_from_dict(PULLBACK)
        assert d.nv1 == 2
        assert d.nv2 == 1
        assert d.ne == 2

    def test_named_objects(self):
        d = diagram_from_dict({
            "V1": [["p", "q"]],
            "V2": [["a", "b"]],
            "edges": [[0, 0, ["b", "b"]]],
        })
        assert d.hom[0]("p") == "b"

    def test_result_to_dict(self):
        out = result_to_dict(limit(diagram_from_dict(PULLBACK)))
        assert out["size"] == 3
        assert sorted(zip(*out["legs"])) == [(0, 0), (1, 0), (2, 1)]


class TestCommands:
    def test_demo(self, capsys):
        assert main(["demo"]) == 0
        assert "FAIL" not in capsys.readouterr().out

    @pytest.mark.parametrize("example", ["join", "coequalizer", "pushout"])
    def test_single_demo(self, example):
        assert main(["demo", "--example", example]) == 0

    def test_limit(self, diagram_file, tmp_path):
        output = tmp_path / "limit.json"
        assert main(["limit", "--input", str(diagram_file), "--join", "sort_merge",
                     "--output", str(output)]) == 0
        result = json.loads(output.read_text())
        assert result["size"] == 3

    def test_colimit(self, diagram_file, tmp_path):
        output = tmp_path / "colimit.json"
        assert main(["colimit", "--input", str(diagram_file), "--output", str(output)]) == 0
        result = json.loads(output.read_text())
        assert result["size"] == 2

    def test_colimit_error_reported(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"V1": [2], "V2": [2], "edges": []}))
        assert main(["colimit", "--input", str(path)]) == 1
        assert "Error" in capsys.readouterr().out

    def test_no_command(self):
        assert main([]) == 0
