from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class Record(dict):
    """
    Enregistrement renvoyé par le service distant.

    Les champs varient selon la requête : on garde un dict, mais avec un accès
    par attribut (`contact.Title`) et des relations imbriquées converties en
    `Record` (`contact.Account.Name`).
    """

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Record":
        return cls({k: _to_value(v) for k, v in data.items()})


def _to_value(value: Any) -> Any:
    if isinstance(value, dict):
        return Record.from_json(value)
    if isinstance(value, list):
        return [_to_value(v) for v in value]
    return value


# label -> un enregistrement (single) ou la liste ordonnée complète
ContentMap = Dict[str, Union[Record, List[Record]]]


class RunMode(str, Enum):
    INLINE = "inline"
    BATCH = "batch"
    EMPTY = "inline-empty"


@dataclass(frozen=True)
class QuerySpec:
    label: str
    query: str
    single: bool = False


@dataclass
class ProcessConfig:
    """Configuration de haut niveau pour exécuter le pipeline."""
    browser_path: Optional[str] = None      # None -> Chromium fourni par Playwright
    navigation_timeout_ms: int = 30_000
    api_version: str = "59.0"
    instance_url: Optional[str] = None
    access_token: Optional[str] = None
    sf_cli_bin: str = "sf"
    allow_empty: bool = False


@dataclass
class PdfRequest:
    """Paramètres d'une exécution, tels que reçus de la ligne de commande."""
    username: str
    template_dir: Path
    template: str
    output: Path
    sobject: Optional[str] = None
    query: Optional[str] = None
    query_file: Optional[Path] = None


@dataclass
class StepResult:
    name: str
    ok: bool
    duration_sec: float
    output_paths: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None


@dataclass
class ProcessReport:
    output: str
    mode: RunMode
    steps: List[StepResult]
    labels: List[str] = field(default_factory=list)
