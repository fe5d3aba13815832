from pathlib import Path
from typing import List, Mapping, Optional, Union

from .errors import ConflictingModes, IncompleteInlineQuery
from .messages import MESSAGES
from .types import QuerySpec, RunMode


def resolve_mode(
    query: Optional[str],
    sobject: Optional[str],
    query_file: Optional[Union[str, Path]],
    messages: Mapping[str, str] = MESSAGES,
) -> RunMode:
    """
    Détermine le mode d'exécution à partir des options fournies.

    Validation pure, aucun appel réseau :
    - `query_file` avec `query` ou `sobject` -> ConflictingModes
    - un seul de `query` / `sobject` -> IncompleteInlineQuery
    - aucun des trois -> RunMode.EMPTY (le rejet éventuel est décidé par l'orchestrateur)
    """
    if (query is not None or sobject is not None) and query_file is not None:
        raise ConflictingModes.from_messages(messages=messages)
    if bool(query) != bool(sobject):
        raise IncompleteInlineQuery.from_messages(messages=messages)
    if query and sobject:
        return RunMode.INLINE
    if query_file is not None:
        return RunMode.BATCH
    return RunMode.EMPTY


def inline_spec(query: str, sobject: str) -> List[QuerySpec]:
    # Mode inline : une seule requête, premier enregistrement sous le nom de l'objet
    return [QuerySpec(label=sobject, query=query, single=True)]
