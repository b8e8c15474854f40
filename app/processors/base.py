from abc import ABC, abstractmethod
from typing import Dict, Any


class BaseGatewayClient(ABC):
    """Abstract base for payment gateway clients."""

    @abstractmethod
    async def initiate(self, session_request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Open a hosted payment session.
        Returns the gateway's raw response dict; a usable session carries `GatewayPageURL`.
        """
        pass

    @abstractmethod
    async def validate(self, val_id: str) -> Dict[str, Any]:
        """
        Confirm a notification with the gateway.
        Returns the gateway's raw validation payload.
        """
        pass

    @property
    @abstractmethod
    def gateway_name(self) -> str:
        pass
