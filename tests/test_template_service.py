"""Template rendering, record access and the temporary working directory."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from crmpdf.errors import OutputWriteFailed, TemplateRenderError, WorkspaceFailed
from crmpdf.template_service import render_template
from crmpdf.types import Record
from crmpdf.workspace import RENDERED_HTML_NAME, working_directory
from crmpdf.writer import write_pdf, write_rendered_html

from .fakes import BOB


def test_renders_record_fields(templates_dir) -> None:
    html = render_template(templates_dir, "contact.html", {"contact": Record.from_json(BOB)})
    assert "Mr Bob Buzzard" in html
    assert 'class="account"' not in html


def test_nested_relationship_fields(templates_dir) -> None:
    contact = Record.from_json({**BOB, "Account": {"attributes": {"type": "Account"}, "Name": "Acme"}})
    assert contact.Account.Name == "Acme"
    html = render_template(templates_dir, "contact.html", {"contact": contact})
    assert '<p class="account">Acme</p>' in html


def test_record_list_is_iterated(templates_dir) -> None:
    content = {
        "opportunity": Record(Name="Big Deal"),
        "lines": [Record(Name="Widget", Quantity=2), Record(Name="Gadget", Quantity=5)],
    }
    html = render_template(templates_dir, "opportunity.html", content)
    assert html.index("Widget") < html.index("Gadget")


def test_values_are_escaped(templates_dir) -> None:
    contact = Record(Title="Mr", FirstName="<b>Bob</b>", LastName="&")
    html = render_template(templates_dir, "contact.html", {"contact": contact})
    assert "&lt;b&gt;Bob&lt;/b&gt;" in html


def test_undefined_label_is_a_render_error(templates_dir) -> None:
    with pytest.raises(TemplateRenderError) as excinfo:
        render_template(templates_dir, "contact.html", {"account": Record(Name="Acme")})
    assert "contact.html" in str(excinfo.value)


def test_missing_template_is_a_render_error(templates_dir) -> None:
    with pytest.raises(TemplateRenderError):
        render_template(templates_dir, "absent.html", {})


def test_record_missing_attribute() -> None:
    with pytest.raises(AttributeError):
        Record(Name="Acme").Phone


def test_working_directory_copies_assets_and_is_removed(templates_dir) -> None:
    with working_directory(templates_dir) as workdir:
        assert (workdir / "style.css").is_file()
        assert (workdir / "img" / "logo.svg").is_file()
        html_path = write_rendered_html(workdir, "<html></html>")
        assert html_path == workdir / RENDERED_HTML_NAME
        assert html_path.read_text(encoding="utf-8") == "<html></html>"
    assert not workdir.exists()


def test_working_directory_is_removed_on_error(templates_dir) -> None:
    seen = []
    with pytest.raises(RuntimeError):
        with working_directory(templates_dir) as workdir:
            seen.append(workdir)
            raise RuntimeError("boom")
    assert not seen[0].exists()


def test_working_directories_are_unique(templates_dir) -> None:
    with working_directory(templates_dir) as first, working_directory(templates_dir) as second:
        assert first != second


def test_write_pdf_overwrites(tmp_path) -> None:
    out = tmp_path / "nested" / "out.pdf"
    write_pdf(out, b"first")
    write_pdf(out, b"second")
    assert Path(out).read_bytes() == b"second"


def test_copy_failure_is_reported_and_cleaned_up(templates_dir) -> None:
    created = []
    real_mkdtemp = tempfile.mkdtemp

    def mkdtemp(**kwargs):
        created.append(real_mkdtemp(**kwargs))
        return created[-1]

    with patch("crmpdf.workspace.tempfile.mkdtemp", side_effect=mkdtemp), patch(
        "crmpdf.workspace.shutil.copytree", side_effect=shutil.Error("disk full")
    ):
        with pytest.raises(WorkspaceFailed, match="disk full"):
            with working_directory(templates_dir):
                pass
    assert not Path(created[0]).exists()


def test_write_pdf_onto_a_directory_fails(tmp_path) -> None:
    with pytest.raises(OutputWriteFailed) as excinfo:
        write_pdf(tmp_path, b"%PDF")
    assert str(tmp_path) in str(excinfo.value)
