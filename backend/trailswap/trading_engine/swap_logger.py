"""
Swap audit logging

Writes one line per swap lifecycle event to the dedicated swap logger
(routed to logs/swap.log by logging_config):
ATTEMPT, SUCCESS, FAILED, SKIPPED, CANCELLED.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from trailswap.constants import (
    SWAP_LOGGER_NAME,
    SWAP_STATUS_ATTEMPT,
    SWAP_STATUS_CANCELLED,
    SWAP_STATUS_FAILED,
    SWAP_STATUS_SKIPPED,
    SWAP_STATUS_SUCCESS,
)
from trailswap.trading_engine.models import SwapRequest

logger = logging.getLogger(__name__)


@dataclass
class SwapLogEntry:
    """Data for a single swap audit entry"""
    status: str
    input_symbol: str
    output_symbol: str
    amount: int
    slippage_bps: int
    details: str = ""
    timestamp: Optional[datetime] = None

    def format(self) -> str:
        return (
            f"SWAP Status: {self.status}, Input: {self.input_symbol}, Output: {self.output_symbol}, "
            f"Amount: {self.amount}, SlippageBps: {self.slippage_bps}, Details: {self.details}"
        )


class SwapLogger:
    """Audit trail for swap operations"""

    def __init__(self, audit_logger: Optional[logging.Logger] = None):
        self.audit = audit_logger or logging.getLogger(SWAP_LOGGER_NAME)

    def log(self, entry: SwapLogEntry):
        if entry.timestamp is None:
            entry.timestamp = datetime.now(timezone.utc)
        level = logging.ERROR if entry.status == SWAP_STATUS_FAILED else logging.INFO
        try:
            self.audit.log(level, entry.format())
        except Exception as e:
            logger.error(f"Failed to write swap audit entry: {e}")

    def _entry(self, status: str, request: SwapRequest, details: str) -> SwapLogEntry:
        return SwapLogEntry(
            status=status,
            input_symbol=request.from_asset.symbol,
            output_symbol=request.to_asset.symbol,
            amount=request.amount,
            slippage_bps=request.slippage_bps,
            details=details,
        )

    def log_attempt(self, request: SwapRequest):
        self.log(self._entry(SWAP_STATUS_ATTEMPT, request, f"Swapping {request.ui_amount} {request.from_asset.symbol}"))

    def log_success(self, request: SwapRequest, signature: str):
        self.log(self._entry(SWAP_STATUS_SUCCESS, request, f"Signature: {signature}"))

    def log_failure(self, request: SwapRequest, error: BaseException):
        self.log(self._entry(SWAP_STATUS_FAILED, request, str(error)))

    def log_cancelled(self, request: SwapRequest, error: BaseException):
        self.log(self._entry(SWAP_STATUS_CANCELLED, request, str(error)))

    def log_skipped(self, from_symbol: str, to_symbol: str, reason: str, slippage_bps: int = 0):
        self.log(SwapLogEntry(
            status=SWAP_STATUS_SKIPPED,
            input_symbol=from_symbol,
            output_symbol=to_symbol,
            amount=0,
            slippage_bps=slippage_bps,
            details=reason,
        ))
