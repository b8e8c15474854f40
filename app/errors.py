"""
Error taxonomy for the payment relay.

Only ConfigurationError is allowed to stop the process (at startup).
Everything raised while serving a request is caught at the route boundary
and turned into a JSON error body.
"""


class PaymentRelayError(Exception):
    """Base class for all relay errors."""


class ConfigurationError(PaymentRelayError):
    """Missing or unsafe environment configuration."""


class GatewayResponseError(PaymentRelayError):
    """Session initiation returned no usable redirect URL."""


class GatewayValidationError(PaymentRelayError):
    """The validation round-trip for a notification failed."""


class StoreError(PaymentRelayError):
    """The order store rejected an update."""


class OrderNotFoundError(StoreError):
    def __init__(self, order_id):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class DownstreamEffectError(PaymentRelayError):
    """Order confirmation or inventory update failed. Never fatal to a request."""


class InvalidTransactionIdError(PaymentRelayError):
    def __init__(self, tran_id):
        super().__init__(f"Malformed transaction id: {tran_id!r}")
        self.tran_id = tran_id
