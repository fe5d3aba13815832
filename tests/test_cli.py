"""Command-line surface: flags, exit codes and messages."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from crmpdf.cli import build_parser, main

from .fakes import FakePdfService


@pytest.fixture
def patched(contact_connection):
    fake_pdf = FakePdfService()
    with patch("crmpdf.orchestrator.connect", return_value=contact_connection) as connect, patch(
        "crmpdf.orchestrator.PlaywrightPdfService", return_value=fake_pdf
    ):
        yield connect, fake_pdf


def _base_args(templates_dir, output):
    return ["pdf", "--targetusername", "test@crmpdf.com", "-d", str(templates_dir), "-t", "contact.html", "-o", str(output)]


def test_success_with_query_file(patched, templates_dir, queries_dir, tmp_path, capsys) -> None:
    output = tmp_path / "contact.pdf"
    code = main(_base_args(templates_dir, output) + ["-f", str(queries_dir / "contact-query.json")])

    assert code == 0
    assert output.exists()
    assert f"PDF file successfully written to {output}" in capsys.readouterr().out


def test_success_with_inline_query(patched, templates_dir, tmp_path, capsys) -> None:
    output = tmp_path / "contact2.pdf"
    code = main(
        _base_args(templates_dir, output) + ["-q", "select Title, FirstName, LastName from Contact", "-s", "contact"]
    )

    assert code == 0
    assert output.exists()
    assert "PDF file successfully written" in capsys.readouterr().out
    connect, fake_pdf = patched
    assert connect.call_args.args[0] == "test@crmpdf.com"
    assert "Mr Bob Buzzard" in fake_pdf.html


@pytest.mark.parametrize("extra", [["-q", "query"], ["-s", "contact"]])
def test_query_file_with_inline_flags_fails(patched, templates_dir, queries_dir, tmp_path, capsys, extra) -> None:
    output = tmp_path / "contact3.pdf"
    code = main(_base_args(templates_dir, output) + ["-f", str(queries_dir / "contact-query.json")] + extra)

    assert code == 1
    assert "queries flag may not be used with query or sobject name" in capsys.readouterr().err
    assert not output.exists()
    patched[0].assert_not_called()


def test_sobject_without_query_fails(patched, templates_dir, tmp_path, capsys) -> None:
    code = main(_base_args(templates_dir, tmp_path / "contact.pdf") + ["-s", "contact"])
    assert code == 1
    assert "query and sobject name must both be specified" in capsys.readouterr().err


def test_json_output(patched, templates_dir, tmp_path, capsys) -> None:
    output = tmp_path / "contact.pdf"
    code = main(_base_args(templates_dir, output) + ["-q", "select Id from Contact", "-s", "contact", "--json"])

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"status": 0, "result": {"success": True, "output": str(output)}}


def test_json_error(patched, templates_dir, tmp_path, capsys) -> None:
    code = main(_base_args(templates_dir, tmp_path / "contact.pdf") + ["--json"])

    assert code == 1
    err = json.loads(capsys.readouterr().err)
    assert err["status"] == 1
    assert err["name"] == "NoContentSourceSpecified"


def test_required_flags() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["pdf", "-d", "templates", "-t", "contact.html", "-o", "out.pdf"])


def test_loglevel_is_case_insensitive() -> None:
    args = build_parser().parse_args(
        ["pdf", "-u", "user@org.com", "-d", "t", "-t", "c.html", "-o", "o.pdf", "--loglevel", "debug"]
    )
    assert args.loglevel == "DEBUG"


def test_unwritable_output_reports_an_error(patched, templates_dir, tmp_path, capsys) -> None:
    output = tmp_path / "outdir"
    output.mkdir()
    code = main(_base_args(templates_dir, output) + ["-q", "select Id from Contact", "-s", "contact"])

    assert code == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: ")
    assert "Unable to write PDF file" in err
    assert str(output) in err


def test_invalid_timeout_setting_reports_an_error(patched, templates_dir, tmp_path, capsys, monkeypatch) -> None:
    monkeypatch.setenv("CRMPDF_NAVIGATION_TIMEOUT_MS", "soon")
    code = main(_base_args(templates_dir, tmp_path / "contact.pdf") + ["-q", "select Id from Contact", "-s", "contact", "--json"])

    assert code == 1
    err = json.loads(capsys.readouterr().err)
    assert err["name"] == "ConfigurationError"
    assert "CRMPDF_NAVIGATION_TIMEOUT_MS" in err["message"]
    patched[0].assert_not_called()


def test_unexpected_errors_do_not_escape(templates_dir, tmp_path, capsys) -> None:
    with patch("crmpdf.cli.run_pdf_pipeline", AsyncMock(side_effect=RuntimeError("boom"))):
        code = main(_base_args(templates_dir, tmp_path / "contact.pdf") + ["-q", "select Id from Contact", "-s", "contact"])

    assert code == 1
    assert capsys.readouterr().err.strip() == "Error: boom"
