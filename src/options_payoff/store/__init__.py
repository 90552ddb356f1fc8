"""Saved-simulation payloads and the HTTP client for the remote store."""

from .client import STORE_URL_ENV, SimulationStoreClient
from .errors import StoreError
from .records import (
    DeleteRequest,
    SimulationRecord,
    SimulationRequest,
    StoreAction,
    build_request,
    new_record_id,
    parse_records,
)

__all__ = [
    "STORE_URL_ENV",
    "SimulationStoreClient",
    "StoreError",
    "StoreAction",
    "SimulationRequest",
    "DeleteRequest",
    "SimulationRecord",
    "build_request",
    "new_record_id",
    "parse_records",
]
