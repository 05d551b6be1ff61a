"""Integration-style tests that exercise the CLI entrypoint with a fake API."""
import csv
from pathlib import Path

import pytest

import courtrecords.cli as cli
from conftest import FakeClient, make_probate_records


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> FakeClient:
    fake = FakeClient(make_probate_records())
    monkeypatch.setattr(cli, "build_client", lambda settings: fake)
    return fake


def test_stages_lists_builtin_queues(capsys):
    assert cli.main(["stages"]) == 0
    out = capsys.readouterr().out
    assert "probate-cr" in out
    assert "affidavit-registry" in out


def test_list_prints_sorted_page(client, capsys):
    assert cli.main(["--stage", "probate-cr", "list", "--sort", "id", "--desc"]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[1].startswith("PRB-25")
    assert "Showing 1 to 10 of 25 records (page 1 of 3)" in out


def test_list_reports_fetch_failure(client, capsys):
    client.fail_list = True
    assert cli.main(["list"]) == 1
    assert "Failed to load applications." in capsys.readouterr().err


def test_list_with_no_matches(client, capsys):
    assert cli.main(["list", "--search", "nobody"]) == 0
    assert "No records found." in capsys.readouterr().out


def test_unknown_stage(client, capsys):
    assert cli.main(["--stage", "nope", "list"]) == 2
    assert "Unknown stage" in capsys.readouterr().err


def test_show_prints_detail_and_actions(client, capsys):
    assert cli.main(["show", "4"]) == 0
    out = capsys.readouterr().out
    assert "Status: CR PENDING" in out
    assert "beneficiaries: 1 item(s)" in out
    assert "Actions: approve, reject" in out


def test_approve_with_yes(client, capsys):
    assert cli.main(["approve", "4", "--remarks", "All documents verified", "--yes"]) == 0
    assert client.puts == [("PUT", "/staff/probate/4/approve", {"remarks": "All documents verified"})]
    assert "Application 4 approved." in capsys.readouterr().out


def test_reject_without_remarks_fails_before_request(client, capsys):
    assert cli.main(["reject", "4", "--yes"]) == 1
    assert client.puts == []
    assert "reason for rejection" in capsys.readouterr().err


def test_reject_prompt_can_be_declined(client, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda _prompt: "n")
    assert cli.main(["reject", "4", "--remarks", "Incomplete"]) == 0
    assert client.puts == []
    assert "Cancelled." in capsys.readouterr().out


def test_action_failure_reports_error(client, capsys):
    client.fail_action = True
    assert cli.main(["approve", "4", "--yes"]) == 1
    assert "Failed to update application status." in capsys.readouterr().err


def test_export_csv(client, tmp_path: Path):
    output = tmp_path / "export.csv"
    assert cli.main(["export", "--search", "kofi", "--output", str(output)]) == 0
    with output.open(encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == 12
