import pandas as pd
import pytest

from pinhigh import cli
from pinhigh.dispersion import reset_calibration


@pytest.fixture(autouse=True)
def _workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    yield
    reset_calibration()


def test_hole_command(capsys):
    assert cli.main(["hole", "--hole", "3", "--skill", "+2", "--seed", "1", "--wind", "10"]) == 0
    out = capsys.readouterr().out
    assert "Lakeshore Links #3" in out
    assert "Score" in out


def test_hole_out_of_range():
    assert cli.main(["hole", "--hole", "19"]) == 2


def test_unknown_skill_is_an_error():
    assert cli.main(["hole", "--skill", "banana"]) == 2


def test_batch_writes_csvs(tmp_path):
    assert cli.main(["batch", "10", "Tour Pro", "--runs", "2", "--out", str(tmp_path / "res"), "--routes"]) == 0
    summary = pd.read_csv(tmp_path / "res" / "summary.csv")
    assert list(summary["profile"]) == ["10", "Tour Pro"]
    assert len(pd.read_csv(tmp_path / "res" / "rounds.csv")) == 4
    assert (tmp_path / "res" / "routes.csv").exists()
