import asyncio
import logging
import time
from typing import Callable, List, Optional, Sequence

from .config import load_config
from .errors import NoContentSourceSpecified
from .messages import MESSAGES
from .pdf_service import PdfService, PlaywrightPdfService
from .query_service import QueryConnection, build_query_specs, execute_queries
from .resolver import resolve_mode
from .salesforce_service import connect
from .template_service import render_template
from .types import ContentMap, PdfRequest, ProcessConfig, ProcessReport, QuerySpec, RunMode, StepResult
from .workspace import working_directory
from .writer import write_pdf, write_rendered_html

logger = logging.getLogger(__name__)

Connector = Callable[[str, ProcessConfig], QueryConnection]


def _failed(steps: List[StepResult], name: str, t0: float, exc: Exception) -> None:
    steps.append(StepResult(name=name, ok=False, duration_sec=time.time() - t0, error=str(exc)))
    logger.error("Étape %s en échec : %s", name, exc)


def _fetch_content(connector: Connector, username: str, cfg: ProcessConfig, specs: Sequence[QuerySpec]) -> ContentMap:
    conn = connector(username, cfg)
    try:
        return execute_queries(conn, specs)
    finally:
        conn.close()


async def run_pdf_pipeline(
    request: PdfRequest,
    cfg: Optional[ProcessConfig] = None,
    connector: Optional[Connector] = None,
    pdf_service: Optional[PdfService] = None,
) -> ProcessReport:
    """
    Orchestrateur principal : requêtes → template HTML → PDF.

    Étapes, strictement séquentielles :
    1. Validation des options (aucun appel réseau avant).
    2. Connexion puis exécution des requêtes (une par une).
    3. Copie du dossier de templates dans un répertoire temporaire et rendu HTML.
    4. Impression PDF par le navigateur headless et écriture du fichier de sortie.

    Les appels bloquants (connexion, requêtes HTTP, CLI Salesforce) tournent dans un
    thread via `asyncio.to_thread` ; les requêtes restent exécutées une par une.

    Toute erreur est fatale : l'étape est tracée puis l'exception remonte telle quelle.
    Le répertoire temporaire et le navigateur sont libérés dans tous les cas.
    """
    cfg = cfg or load_config()
    connector = connector or (lambda username, c: connect(username, c, messages=MESSAGES))
    pdf_service = pdf_service or PlaywrightPdfService(
        executable_path=cfg.browser_path,
        timeout_ms=cfg.navigation_timeout_ms,
    )
    steps: List[StepResult] = []

    # 1) Validation
    mode = resolve_mode(request.query, request.sobject, request.query_file)
    if mode is RunMode.EMPTY and not cfg.allow_empty:
        raise NoContentSourceSpecified.from_messages()
    specs = build_query_specs(mode, request.query, request.sobject, request.query_file)
    logger.info("Mode %s, %d requête(s)", mode.value, len(specs))

    # 2) Requêtes
    content: ContentMap = {}
    if specs:
        t0 = time.time()
        try:
            content = await asyncio.to_thread(_fetch_content, connector, request.username, cfg, specs)
        except Exception as e:
            _failed(steps, "queries", t0, e)
            raise
        steps.append(StepResult(name="queries", ok=True, duration_sec=time.time() - t0))

    # 3) + 4) Rendu et PDF dans le répertoire de travail
    t0 = time.time()
    step = "render_template"
    try:
        html = render_template(request.template_dir, request.template, content)
        with working_directory(request.template_dir) as workdir:
            html_path = write_rendered_html(workdir, html)
            steps.append(
                StepResult(
                    name=step,
                    ok=True,
                    duration_sec=time.time() - t0,
                    output_paths={"html": str(html_path)},
                )
            )

            t0 = time.time()
            step = "html_to_pdf"
            pdf = await pdf_service.html_to_pdf(html_path)

        out = write_pdf(request.output, pdf)
        steps.append(
            StepResult(
                name=step,
                ok=True,
                duration_sec=time.time() - t0,
                output_paths={"pdf": str(out)},
            )
        )
    except Exception as e:
        _failed(steps, step, t0, e)
        raise

    return ProcessReport(
        output=str(request.output),
        mode=mode,
        steps=steps,
        labels=list(content),
    )
