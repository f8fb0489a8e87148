# tests/test_cli.py

import json

import pytest
from typer.testing import CliRunner

from contact_dedup.cli.app import app
from contact_dedup.cli.utils import load_records

runner = CliRunner()


@pytest.fixture
def records_file(tmp_path, make_record):
    records = [
        make_record("1", "Jane Doe", emails=["jane@example.com"]),
        make_record("2", "Jane Doe", emails=["jane@example.com"], org="Acme GmbH"),
        make_record("3", "Klaus Becker"),
    ]
    path = tmp_path / "contacts.json"
    path.write_text(json.dumps([r.to_dict() for r in records]), encoding="utf-8")
    return path


def test_load_records_accepts_wrapped_list(tmp_path):
    path = tmp_path / "wrapped.json"
    path.write_text(json.dumps({"records": [{"id": "1", "name": "Jane"}]}), encoding="utf-8")
    records = load_records(path)
    assert [r.id for r in records] == ["1"]
    assert records[0].display_name == "Jane"


def test_load_records_rejects_other_shapes(tmp_path):
    path = tmp_path / "scalar.json"
    path.write_text("42", encoding="utf-8")
    with pytest.raises(ValueError):
        load_records(path)


def test_scan_writes_groups(records_file, tmp_path):
    out = tmp_path / "groups.json"
    result = runner.invoke(app, ["scan", str(records_file), "--out", str(out), "--pretty"])
    assert result.exit_code == 0, result.output

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["counts"] == {"records": 3, "groups": 1, "high": 1, "medium": 0}
    assert data["groups"][0]["contact_ids"] == ["1", "2"]
    assert data["groups"][0]["confidence"] == "high"


def test_scan_prints_table(records_file):
    result = runner.invoke(app, ["scan", str(records_file)])
    assert result.exit_code == 0, result.output
    assert "Duplicate groups (1)" in result.output


def test_scan_missing_file(tmp_path):
    result = runner.invoke(app, ["scan", str(tmp_path / "missing.json")])
    assert result.exit_code != 0


def test_merge_writes_record(records_file, tmp_path):
    out = tmp_path / "merged.json"
    result = runner.invoke(
        app,
        ["merge", str(records_file), "--master", "1", "--duplicate", "2", "--out", str(out)],
    )
    assert result.exit_code == 0, result.output

    merged = json.loads(out.read_text(encoding="utf-8"))
    assert merged["id"] == "1"
    assert merged["organization"] == "Acme GmbH"
    assert "BEGIN:VCARD" in merged["raw_contact_text"]


def test_merge_unknown_master(records_file, tmp_path):
    result = runner.invoke(
        app,
        ["merge", str(records_file), "-m", "404", "-d", "2", "--out", str(tmp_path / "m.json")],
    )
    assert result.exit_code == 1


def test_merge_requires_duplicate(records_file):
    result = runner.invoke(app, ["merge", str(records_file), "-m", "1"])
    assert result.exit_code == 2
