import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Mapping, Union

from .errors import WorkspaceFailed
from .messages import MESSAGES

logger = logging.getLogger(__name__)

WORKDIR_PREFIX = "crmpdf_"
WORKDIR_MODE = 0o750
RENDERED_HTML_NAME = "tmp.html"


@contextmanager
def working_directory(
    template_dir: Union[str, Path],
    messages: Mapping[str, str] = MESSAGES,
) -> Iterator[Path]:
    """
    Copie tout le dossier de templates dans un répertoire temporaire unique,
    pour que les chemins relatifs (images, CSS) restent valides à côté du HTML rendu.

    Le répertoire est supprimé à la sortie du bloc, y compris en cas d'erreur.
    """
    src = Path(template_dir).expanduser().resolve()
    workdir = Path(tempfile.mkdtemp(prefix=WORKDIR_PREFIX))
    try:
        try:
            os.chmod(workdir, WORKDIR_MODE)
            shutil.copytree(str(src), str(workdir), dirs_exist_ok=True)
        except (shutil.Error, OSError) as exc:
            raise WorkspaceFailed.from_messages(src, exc, messages=messages) from exc
        logger.debug("Templates copiés : %s -> %s", src, workdir)
        yield workdir
    finally:
        shutil.rmtree(workdir, ignore_errors=True)
        logger.debug("Répertoire temporaire supprimé : %s", workdir)
