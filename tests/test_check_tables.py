import json

from companion.check_tables import check_tables


def test_valid_file_with_utterance(tmp_path, capsys):
    path = tmp_path / "tables.json"
    path.write_text(json.dumps({"slang": [{"term": "gg", "meaning": "good game"}]}), encoding="utf-8")

    assert check_tables(str(path), ["gg all"]) == 0
    out = capsys.readouterr().out
    assert "Tables OK." in out
    assert "Slang terms:      1" in out
    assert '"slang_meaning": "good game"' in out


def test_invalid_file(tmp_path, capsys):
    path = tmp_path / "tables.json"
    path.write_text(json.dumps({"context_rules": [{"pattern": "(", "label": "x", "confidence": 0.5}]}), encoding="utf-8")

    assert check_tables(str(path)) == 1
    assert capsys.readouterr().out.startswith("Error: Invalid preprocessor tables")


def test_missing_file(tmp_path, capsys):
    assert check_tables(str(tmp_path / "nope.json")) == 1
    assert "not found" in capsys.readouterr().out
