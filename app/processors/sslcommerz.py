import logging
from typing import Dict, Any, Optional

import httpx
from fastapi import Depends

from app.config import Settings, get_settings
from app.errors import GatewayResponseError, GatewayValidationError
from app.processors.base import BaseGatewayClient

logger = logging.getLogger(__name__)

INIT_PATH = "/gwprocess/v4/api.php"
VALIDATION_PATH = "/validator/api/validationserverAPI.php"


class SSLCommerzClient(BaseGatewayClient):
    """
    SSLCommerz v4 client.
    Session init: form POST, response carries `GatewayPageURL` and `sessionkey`
    Validation: GET by val_id, response carries `status` and the pass-through `value_a..value_d`
    Sandbox and live differ only in base URL and credentials.
    """

    def __init__(
        self,
        store_id: str,
        store_passwd: str,
        is_live: bool = False,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.store_id = store_id
        self.store_passwd = store_passwd
        self.is_live = is_live
        self.timeout = timeout
        self.transport = transport
        if is_live:
            self.base_url = "https://securepay.sslcommerz.com"
        else:
            self.base_url = "https://sandbox.sslcommerz.com"

    @property
    def gateway_name(self) -> str:
        return "sslcommerz"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def initiate(self, session_request: Dict[str, Any]) -> Dict[str, Any]:
        form = {"store_id": self.store_id, "store_passwd": self.store_passwd}
        form.update({k: str(v) for k, v in session_request.items()})
        try:
            async with self._client() as client:
                response = await client.post(INIT_PATH, data=form)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise GatewayResponseError(
                f"SSLCommerz session request failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GatewayResponseError(f"SSLCommerz session request failed: {e}") from e
        except ValueError as e:
            raise GatewayResponseError("SSLCommerz returned a non-JSON session response") from e

    async def validate(self, val_id: str) -> Dict[str, Any]:
        params = {
            "val_id": val_id,
            "store_id": self.store_id,
            "store_passwd": self.store_passwd,
            "v": 1,
            "format": "json",
        }
        try:
            async with self._client() as client:
                response = await client.get(VALIDATION_PATH, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise GatewayValidationError(
                f"SSLCommerz validation failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GatewayValidationError(f"SSLCommerz validation failed: {e}") from e
        except ValueError as e:
            raise GatewayValidationError("SSLCommerz returned a non-JSON validation response") from e


def get_gateway_client(settings: Settings = Depends(get_settings)) -> BaseGatewayClient:
    return SSLCommerzClient(
        store_id=settings.sslc_store_id,
        store_passwd=settings.sslc_store_password,
        is_live=settings.is_live,
        timeout=settings.gateway_timeout_seconds,
    )
