import io
import json

import pytest

from typology_assist import cli
from typology_assist.errors import ExportFailed
from typology_assist.export import export_card
from typology_assist.models import ScenarioMetadata
from typology_assist.rules import RuleEngine


def test_card_output(capsys):
    code = cli.main(["--country", "IN", "--domain", "psp", "--product", "wallet", "mule wallet"])
    assert code == 0
    out = capsys.readouterr().out
    assert out.startswith("Likely typologies:\n")
    assert "Money mule / pass-through account" in out


def test_json_output(capsys):
    code = cli.main(["--format", "json", "--cross-border", "Yes", "usdt sent cross border"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["result"]["meta"]["crossBorder"] == "Yes"
    assert payload["narrative"]
    assert payload["filing_paragraph"]


def test_scenario_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("chargeback dispute on several cards\n"))
    assert cli.main(["--domain", "cards"]) == 0
    assert "Refund and chargeback abuse" in capsys.readouterr().out


def test_blank_scenario_exit_code():
    assert cli.main(["   "]) == cli.EXIT_BLANK_SCENARIO


def test_missing_catalog_exit_code(tmp_path):
    code = cli.main(["--catalog", str(tmp_path / "nope.yaml"), "mule"])
    assert code == cli.EXIT_CATALOG_UNAVAILABLE


def test_output_file(tmp_path):
    target = tmp_path / "card.txt"
    assert cli.main(["--output", str(target), "mule wallet"]) == 0
    assert target.read_text(encoding="utf-8").startswith("Likely typologies:\n")


def test_export_failure_raises(tmp_path):
    result = RuleEngine([]).analyse(ScenarioMetadata(), "anything")
    with pytest.raises(ExportFailed):
        export_card(result, str(tmp_path / "missing-dir" / "card.txt"))
    assert cli.main(["--output", str(tmp_path / "missing-dir" / "card.txt"), "mule"]) == cli.EXIT_EXPORT_FAILED
