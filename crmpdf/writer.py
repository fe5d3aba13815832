from pathlib import Path
from typing import Mapping

from .errors import OutputWriteFailed
from .messages import MESSAGES
from .workspace import RENDERED_HTML_NAME


def write_rendered_html(workdir: Path, html: str) -> Path:
    """Écrit le HTML rendu à la racine du répertoire de travail (`tmp.html`)."""
    path = workdir / RENDERED_HTML_NAME
    path.write_text(html, encoding="utf-8")
    return path


def write_pdf(output: Path, pdf: bytes, messages: Mapping[str, str] = MESSAGES) -> Path:
    """Écrit le PDF final ; un fichier existant est écrasé."""
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(pdf)
    except OSError as exc:
        raise OutputWriteFailed.from_messages(output, exc, messages=messages) from exc
    return output
