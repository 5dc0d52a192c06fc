"""
Upstream signature fetcher — paginated getSignaturesForAddress over JSON-RPC.

Walks the provider's history for one address, newest first, following the
`before` cursor until a page comes back short. A page of exactly
SIGNATURES_PAGE_LIMIT records is taken to mean more may exist; anything
shorter ends the walk. The provider does not promise this, it is the accepted
termination policy.

No retry and no page-depth limit: a transport failure on any page aborts the
whole walk with UpstreamRpcError.
"""

from __future__ import annotations

import itertools
from typing import Any

import httpx

from backend_redeem.core.exceptions import UpstreamRpcError
from backend_redeem.redeem_logging import get_logger
from backend_redeem.redeem_logging.logger import mask_api_key
from backend_redeem.txstats.models import SignatureRecord

logger = get_logger(__name__)

SIGNATURES_PAGE_LIMIT = 100
REQUEST_TIMEOUT_SEC = 30.0
RPC_METHOD = "getSignaturesForAddress"

_request_ids = itertools.count(1)


def build_rpc_body(address: str, before: str | None, limit: int = SIGNATURES_PAGE_LIMIT) -> dict[str, Any]:
    opts: dict[str, Any] = {"limit": limit}
    if before is not None:
        opts["before"] = before
    return {
        "jsonrpc": "2.0",
        "id": next(_request_ids),
        "method": RPC_METHOD,
        "params": [address, opts],
    }


class SignatureFetcher:
    """
    Fetch every signature for an address from a Solana RPC endpoint.

    Pass `client` to share an httpx.Client (tests use one backed by
    httpx.MockTransport); otherwise a client is opened per fetch_all_signatures call.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        page_limit: int = SIGNATURES_PAGE_LIMIT,
        request_timeout_sec: float = REQUEST_TIMEOUT_SEC,
        client: httpx.Client | None = None,
    ) -> None:
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if not (1 <= page_limit <= 1000):
            raise ValueError("page_limit must be between 1 and 1000")
        self._rpc_url = rpc_url.strip()
        self._page_limit = page_limit
        self._request_timeout = request_timeout_sec
        self._client = client

    @property
    def page_limit(self) -> int:
        return self._page_limit

    def fetch_all_signatures(self, address: str) -> list[SignatureRecord]:
        """Return all signature records for address, most recent first."""
        if self._client is not None:
            return self._fetch_all(self._client, address)
        with httpx.Client(timeout=httpx.Timeout(self._request_timeout)) as client:
            return self._fetch_all(client, address)

    def _fetch_all(self, client: httpx.Client, address: str) -> list[SignatureRecord]:
        records: list[SignatureRecord] = []
        before: str | None = None
        page = 0
        while True:
            page += 1
            batch = self._fetch_page(client, address, before, page)
            records.extend(SignatureRecord.from_rpc_item(item) for item in batch if isinstance(item, dict))
            if len(batch) < self._page_limit:
                break
            last = batch[-1]
            cursor = last.get("signature") if isinstance(last, dict) else None
            if not isinstance(cursor, str) or not cursor:
                # Without a cursor the next request would restart from the newest page
                logger.warning("tx_stats_rpc_missing_cursor", address=address, page=page)
                break
            before = cursor
        logger.debug(
            "tx_stats_signatures_fetched",
            address=address,
            pages=page,
            signature_count=len(records),
        )
        return records

    def _fetch_page(
        self,
        client: httpx.Client,
        address: str,
        before: str | None,
        page: int,
    ) -> list[Any]:
        """Perform one getSignaturesForAddress call; raise UpstreamRpcError on transport or decode failure."""
        body = build_rpc_body(address, before, self._page_limit)
        try:
            resp = client.post(self._rpc_url, json=body)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamRpcError(
                f"Solana RPC returned HTTP {e.response.status_code} on page {page}",
                method=RPC_METHOD,
                page=page,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamRpcError(
                f"Solana RPC request to {mask_api_key(self._rpc_url)} failed on page {page}: {e}",
                method=RPC_METHOD,
                page=page,
            ) from e
        except ValueError as e:
            raise UpstreamRpcError(
                f"Solana RPC returned invalid JSON on page {page}",
                method=RPC_METHOD,
                page=page,
            ) from e

        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, list):
            # Missing result ends pagination as an empty page rather than failing the cycle
            logger.warning(
                "tx_stats_rpc_missing_result",
                address=address,
                page=page,
                rpc_error=data.get("error") if isinstance(data, dict) else None,
            )
            return []
        return result
