import json
import logging
import subprocess
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests

from .errors import ConnectionFailed, QueryFailed
from .messages import MESSAGES
from .types import ProcessConfig, Record

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 30


def _mask(token: str) -> str:
    return f"{token[:10]}..." if token else ""


@dataclass
class SalesforceConnection:
    """
    Connexion REST authentifiée vers l'org.

    L'authentification elle-même est déléguée (variables d'environnement ou
    CLI Salesforce, voir `connect`) : on ne manipule ici qu'un token déjà émis.
    """

    instance_url: str
    access_token: str
    api_version: str = "59.0"
    messages: Mapping[str, str] = field(default_factory=lambda: MESSAGES, repr=False)
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    def __post_init__(self) -> None:
        self.instance_url = self.instance_url.rstrip("/")
        self.session.headers.update({"Authorization": f"Bearer {self.access_token}"})

    @property
    def query_url(self) -> str:
        return f"{self.instance_url}/services/data/v{self.api_version}/query"

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        resp = self.session.get(url, params=params, timeout=HTTP_TIMEOUT)
        resp.raise_for_status()
        return resp.json()

    def query(self, soql: str) -> List[Record]:
        """
        Exécute une requête SOQL et renvoie tous les enregistrements.

        Les résultats paginés sont suivis via `nextRecordsUrl` jusqu'à `done`.
        Pas de cache ni de nouvel essai : toute erreur HTTP est fatale.
        """
        logger.debug("Requête SOQL : %s", soql)
        records: List[Record] = []
        try:
            data = self._get(self.query_url, params={"q": soql})
            while True:
                records.extend(Record.from_json(r) for r in data.get("records") or [])
                next_url = data.get("nextRecordsUrl")
                if data.get("done", True) or not next_url:
                    break
                data = self._get(f"{self.instance_url}{next_url}")
        except (requests.RequestException, ValueError) as exc:
            raise QueryFailed.from_messages(soql, exc, messages=self.messages) from exc
        logger.debug("%d enregistrement(s) pour : %s", len(records), soql)
        return records

    def close(self) -> None:
        self.session.close()


def _credentials_from_cli(username: str, cfg: ProcessConfig) -> Tuple[str, str]:
    """
    Récupère instanceUrl + accessToken d'une org déjà authentifiée,
    via `sf org display --target-org <username> --json`.
    """
    cmd = [cfg.sf_cli_bin, "org", "display", "--target-org", username, "--json"]
    logger.debug("Résolution des identifiants : %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=120)
    except (OSError, subprocess.SubprocessError) as exc:
        raise RuntimeError(f"impossible d'exécuter {cfg.sf_cli_bin!r}: {exc}") from exc

    try:
        payload = json.loads(result.stdout or "{}")
    except ValueError as exc:
        raise RuntimeError(f"sortie JSON invalide de {cfg.sf_cli_bin!r}") from exc

    if result.returncode != 0 or payload.get("status", 0) != 0:
        raise RuntimeError(payload.get("message") or result.stderr.strip() or f"code retour {result.returncode}")

    info = payload.get("result") or {}
    instance_url = info.get("instanceUrl")
    access_token = info.get("accessToken")
    if not instance_url or not access_token:
        raise RuntimeError("instanceUrl / accessToken absents de la réponse")
    return instance_url, access_token


def connect(
    username: str,
    cfg: ProcessConfig,
    messages: Mapping[str, str] = MESSAGES,
) -> SalesforceConnection:
    """
    Ouvre une connexion pour `username`.

    - SF_INSTANCE_URL + SF_ACCESS_TOKEN définis : utilisés tels quels.
    - sinon : identifiants demandés à la CLI Salesforce.
    """
    if cfg.instance_url and cfg.access_token:
        instance_url, access_token = cfg.instance_url, cfg.access_token
        logger.debug("Identifiants lus depuis l'environnement pour %s", username)
    else:
        try:
            instance_url, access_token = _credentials_from_cli(username, cfg)
        except RuntimeError as exc:
            raise ConnectionFailed.from_messages(username, exc, messages=messages) from exc

    logger.info("Connecté à %s (token %s)", instance_url, _mask(access_token))
    return SalesforceConnection(
        instance_url=instance_url,
        access_token=access_token,
        api_version=cfg.api_version,
        messages=messages,
    )
