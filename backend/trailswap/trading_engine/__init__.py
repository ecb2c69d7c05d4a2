"""
Trading Engine Components

Core decision components:
- ThresholdTracker: Computes the (trailing) stop-loss trigger price
- PositionStateMachine: Tracks which asset is held and decides swaps
- RetryingExecutor: Wraps one swap attempt with fixed-delay retries
- SwapExecutionService: Computes swap amounts and runs the wrapped swap
- SwapLogger: Writes the swap audit trail
"""
