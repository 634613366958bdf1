import json

import bibnorm

BIB = """
@string{me = "A. Author"}
@misc{k1, author = me, month = mar}
"""


def test_main_bib(tmp_path, capsys):
    path = tmp_path / "refs.bib"
    path.write_text(BIB)
    assert bibnorm.main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "@misc{k1," in out
    assert "author = {A. Author}" in out
    assert "month = {March}" in out


def test_main_json_no_months(tmp_path, capsys):
    path = tmp_path / "refs.bib"
    path.write_text(BIB)
    assert bibnorm.main(["-f", "json", "--no-months", str(path)]) == 0
    (record,) = json.loads(capsys.readouterr().out)
    assert record["fields"] == [["author", "A. Author"], ["month", ""]]


def test_main_warns(tmp_path, capsys):
    path = tmp_path / "refs.bib"
    path.write_text("@misc{k1, author = nobody}")
    assert bibnorm.main(["-W", str(path)]) == 0
    err = capsys.readouterr().err
    assert err.startswith("[WARNING]")
    assert "unknown macro `nobody'" in err


def test_main_error(tmp_path, capsys):
    path = tmp_path / "bad.bib"
    path.write_text("@misc{k1, author = }")
    assert bibnorm.main([str(path)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("[ERROR]")
    assert "bad.bib" in err
