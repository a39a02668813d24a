"""Coordinators - boundary between a transport and the mining services."""

from sentence_base.coordinators.mining_coordinator import MiningCoordinator
from sentence_base.coordinators.responses import ErrorResponse, SuccessResponse, error_to_response

__all__ = [
    "MiningCoordinator",
    "SuccessResponse",
    "ErrorResponse",
    "error_to_response",
]
