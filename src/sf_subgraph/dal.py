import logging
from typing import Any, Dict, Optional, Protocol

import requests
from requests import Response

from .config import Settings
from .errors import SubgraphRequestError

logger = logging.getLogger(__name__)


class GraphQLClient(Protocol):
    """Anything that can execute a GraphQL document and return its `data` object."""

    def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...


class SubgraphClient:
    """Thin client for a subgraph GraphQL endpoint."""

    def __init__(
        self, url: str, settings: Settings, session: Optional[requests.Session] = None
    ) -> None:
        self.url = url
        self.settings = settings
        self.session = session or requests.Session()

    def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = self._post({"query": document, "variables": variables or {}})
        errors = payload.get("errors")
        if errors:
            messages = "; ".join(
                str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
            )
            raise SubgraphRequestError(f"Subgraph returned errors: {messages}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise SubgraphRequestError("Subgraph response missing 'data' object")
        return data

    def close(self) -> None:
        self.session.close()

    def _post(self, body: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self.settings.subgraph_api_token:
            headers["Authorization"] = f"Bearer {self.settings.subgraph_api_token}"
        try:
            resp: Response = self.session.post(
                self.url,
                json=body,
                headers=headers,
                timeout=self.settings.request_timeout_seconds,
                verify=self.settings.request_verify_tls,
            )
        except requests.RequestException as e:
            logger.warning("subgraph request failed", extra={"extra": {"url": self.url, "error": str(e)}})
            raise SubgraphRequestError(f"Subgraph request error: {e}") from e

        if not resp.ok:
            text = resp.text[:500]
            logger.warning(
                "subgraph non-OK status",
                extra={"extra": {"url": self.url, "status": resp.status_code}},
            )
            raise SubgraphRequestError(f"Subgraph non-OK status {resp.status_code}: {text}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise SubgraphRequestError("Subgraph returned non-JSON response") from e

        if not isinstance(payload, dict):
            raise SubgraphRequestError("Subgraph response must be a JSON object")
        return payload
