"""
Midtrans HTTP client.

Only place where the service talks to Midtrans:
- Snap API (``POST /snap/v1/transactions``) to open a checkout session
- Core API (``GET /v2/{order_id}/status``) to read the authoritative status

Both calls authenticate with HTTP Basic, username = server key, empty password.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from midtrans_service.config import Settings
from midtrans_service.errors import GatewayConfigError, GatewayError, GatewayResponseError

logger = logging.getLogger(__name__)


class MidtransClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.settings = settings
        self._http = httpx.Client(
            auth=(settings.server_key, ""),
            headers={"Accept": "application/json"},
            timeout=settings.timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "MidtransClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _require_server_key(self) -> None:
        if not self.settings.server_key:
            raise GatewayConfigError("MIDTRANS_SERVER_KEY is not configured.")

    def create_snap_transaction(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self._require_server_key()
        url = f"{self.settings.snap_base_url}/snap/v1/transactions"
        order_id = payload.get("transaction_details", {}).get("order_id")
        logger.info("Creating Snap transaction order_id=%s url=%s", order_id, url)

        try:
            response = self._http.post(url, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Snap transaction request failed order_id=%s: %s", order_id, exc)
            raise GatewayError() from exc

        data = _json_or_none(response)
        if response.is_error:
            messages = data.get("error_messages") if isinstance(data, dict) else None
            logger.error(
                "Midtrans Snap error order_id=%s status=%s body=%s params=%s",
                order_id, response.status_code, response.text, payload,
            )
            raise GatewayError(messages or None, status=response.status_code, body=response.text)

        if not isinstance(data, dict):
            logger.error("Unexpected Snap response order_id=%s body=%s", order_id, response.text)
            raise GatewayResponseError(status=response.status_code, body=response.text)

        return data

    def get_transaction_status(self, order_id: str) -> Dict[str, Any]:
        self._require_server_key()
        url = f"{self.settings.api_base_url}/v2/{quote(order_id, safe='')}/status"
        logger.info("Requesting Midtrans transaction status order_id=%s url=%s", order_id, url)

        try:
            response = self._http.get(url)
        except httpx.HTTPError as exc:
            logger.error("Status request failed order_id=%s: %s", order_id, exc)
            raise GatewayError("Failed to fetch transaction data from Midtrans.") from exc

        if response.is_error:
            logger.error(
                "Failed to fetch transaction data order_id=%s status=%s body=%s",
                order_id, response.status_code, response.text,
            )
            raise GatewayError(
                "Failed to fetch transaction data from Midtrans.",
                status=response.status_code,
                body=response.text,
            )

        data = _json_or_none(response)
        if not isinstance(data, dict) or not data.get("order_id"):
            logger.error("Invalid status response order_id=%s body=%s", order_id, response.text)
            raise GatewayResponseError(status=response.status_code, body=response.text)

        return data


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
