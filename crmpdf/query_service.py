import json
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

from .errors import EmptyResultSet, MalformedBatchFile
from .messages import MESSAGES
from .resolver import inline_spec
from .types import ContentMap, QuerySpec, Record, RunMode

logger = logging.getLogger(__name__)


class QueryConnection(Protocol):
    def query(self, soql: str) -> List[Record]: ...

    def close(self) -> None: ...


def _pairs_warning_duplicates(path: Path):
    def hook(pairs: List[Tuple[str, Any]]) -> dict:
        seen: dict = {}
        for key, value in pairs:
            if key in seen:
                logger.warning("Clé %r dupliquée dans %s : la dernière valeur est conservée", key, path)
            seen[key] = value
        return seen
    return hook


def load_query_file(path: Union[str, Path], messages: Mapping[str, str] = MESSAGES) -> List[QuerySpec]:
    """
    Lit un fichier de requêtes nommées :

        {"<label>": {"query": "<SOQL>", "single": true}, ...}

    `single` est optionnel (false par défaut). L'ordre des entrées est celui du fichier.
    """
    path = Path(path)

    def malformed(reason: Any) -> MalformedBatchFile:
        return MalformedBatchFile.from_messages(path, reason, messages=messages)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise malformed(exc) from exc

    try:
        data = json.loads(raw, object_pairs_hook=_pairs_warning_duplicates(path))
    except ValueError as exc:
        raise malformed(f"invalid JSON ({exc})") from exc

    if not isinstance(data, dict):
        raise malformed("top level must be an object of named queries")

    specs: List[QuerySpec] = []
    for label, entry in data.items():
        if not isinstance(entry, dict):
            raise malformed(f"entry {label!r} must be an object")
        query = entry.get("query")
        if not isinstance(query, str) or not query.strip():
            raise malformed(f"entry {label!r} has no 'query' string")
        single = entry.get("single", False)
        if not isinstance(single, bool):
            raise malformed(f"entry {label!r}: 'single' must be a boolean")
        specs.append(QuerySpec(label=label, query=query, single=single))
    return specs


def execute_queries(
    conn: QueryConnection,
    specs: Sequence[QuerySpec],
    messages: Mapping[str, str] = MESSAGES,
) -> ContentMap:
    """
    Exécute les requêtes une à une (séquentiellement) et construit le contenu du template.

    Une requête sans résultat interrompt immédiatement le traitement (EmptyResultSet).
    """
    content: ContentMap = {}
    for idx, spec in enumerate(specs, start=1):
        logger.info("[%d/%d] %s", idx, len(specs), spec.label)
        records = conn.query(spec.query)
        if not records:
            raise EmptyResultSet.for_query(spec.query, messages=messages)
        content[spec.label] = records[0] if spec.single else list(records)
    return content


def build_query_specs(
    mode: RunMode,
    query: Optional[str] = None,
    sobject: Optional[str] = None,
    query_file: Optional[Union[str, Path]] = None,
    messages: Mapping[str, str] = MESSAGES,
) -> List[QuerySpec]:
    if mode is RunMode.INLINE:
        return inline_spec(query, sobject)
    if mode is RunMode.BATCH:
        return load_query_file(query_file, messages=messages)
    return []
