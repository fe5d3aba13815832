import logging
from pathlib import Path
from typing import Mapping, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape

from .errors import TemplateRenderError
from .messages import MESSAGES
from .types import ContentMap

logger = logging.getLogger(__name__)


def _environment(template_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        undefined=StrictUndefined,
        autoescape=select_autoescape(["html", "htm", "xml"]),
    )


def render_template(
    template_dir: Union[str, Path],
    template: str,
    content: ContentMap,
    messages: Mapping[str, str] = MESSAGES,
) -> str:
    """
    Rend `template` (relatif à `template_dir`) avec les labels du contenu comme variables.

    Une référence à un label absent lève TemplateRenderError (StrictUndefined).
    """
    template_dir = Path(template_dir)
    try:
        tpl = _environment(template_dir).get_template(template)
        html = tpl.render(**content)
    except TemplateError as exc:
        raise TemplateRenderError.from_messages(template, exc, messages=messages) from exc
    logger.debug("Template %s rendu (%d caractères)", template, len(html))
    return html
