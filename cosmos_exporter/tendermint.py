import base64
import binascii
import logging

import requests

from .errors import MalformedUpstream, UpstreamUnavailable
from .types import TendermintValidator

logger = logging.getLogger(__name__)

TIMEOUT = 10
PER_PAGE = 100


class TendermintRPC:
    """JSON-over-HTTP client for the consensus RPC of the node."""

    def __init__(self, url, session=None, timeout=TIMEOUT):
        self.url = url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, path, params=None):
        url = f"{self.url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"GET {path}", str(e)) from e
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedUpstream(f"GET {path}: invalid JSON: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("result"), dict):
            raise MalformedUpstream(f"GET {path}: response has no result object")
        return data["result"]

    def status(self) -> str:
        """Chain id reported in ``result.node_info.network``."""
        result = self._get("/status")
        network = (result.get("node_info") or {}).get("network")
        if not network:
            raise MalformedUpstream("GET /status: node_info.network is empty")
        return network

    def validators(self):
        """Yield the consensus validator set page by page."""
        page = 1
        seen = 0
        while True:
            result = self._get("/validators", params={"page": page, "per_page": PER_PAGE})
            entries = result.get("validators") or []
            for entry in entries:
                yield _parse_validator(entry)
            seen += len(entries)
            try:
                total = int(result.get("total", seen))
            except (TypeError, ValueError) as e:
                raise MalformedUpstream(f"GET /validators: bad total {result.get('total')!r}") from e
            if not entries or seen >= total:
                return
            page += 1


def _parse_validator(entry) -> TendermintValidator:
    try:
        pub_key = entry.get("pub_key") or {}
        return TendermintValidator(
            address=entry["address"],
            pubkey_type=pub_key.get("type", ""),
            pubkey=base64.b64decode(pub_key.get("value", ""), validate=True),
        )
    except (AttributeError, KeyError, binascii.Error) as e:
        raise MalformedUpstream(f"GET /validators: bad validator entry: {e}") from e
