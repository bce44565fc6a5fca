"""Key-value ledger gateways.

The attribution store only ever talks to a LedgerGateway. Concrete
gateways live here so the store can run against a dict, a local
directory, or a remote ledger over HTTP.
"""

from .filesystem import FilesystemLedgerGateway
from .http_client import HTTPLedgerGateway
from .interface import GatewayError, GatewayRejected, GatewayUnavailable, LedgerGateway
from .memory import InMemoryLedgerGateway

__all__ = [
    "FilesystemLedgerGateway",
    "GatewayError",
    "GatewayRejected",
    "GatewayUnavailable",
    "HTTPLedgerGateway",
    "InMemoryLedgerGateway",
    "LedgerGateway",
]
