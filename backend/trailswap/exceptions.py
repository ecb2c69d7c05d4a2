"""
Domain exceptions for the swap agent.

Adapters raise these instead of library-specific errors (httpx, Solana RPC)
so the monitor loop can apply one error policy regardless of where the
failure came from. Only ConfigurationError and StartupError are allowed to
escape SwapMonitor.start().
"""

from typing import Optional


class SwapAgentError(Exception):
    """Base error for everything raised by the agent."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(SwapAgentError):
    """Invalid or missing configuration (fatal at startup)."""


class StartupError(SwapAgentError):
    """The agent could not start, e.g. initial position is unknown (fatal)."""


class PriceUnavailableError(SwapAgentError):
    """Price source failed transiently (cycle is skipped)."""


class BalanceUnavailableError(SwapAgentError):
    """Balance lookup failed transiently (cycle is skipped)."""


class InsufficientBalanceError(SwapAgentError):
    """Nothing to swap after honoring the minimum reserve (local no-op)."""

    def __init__(self, message: str, available: float = 0.0):
        self.available = available
        super().__init__(message)


class ExecutionError(SwapAgentError):
    """A single swap attempt failed."""

    def __init__(self, message: str, signature: Optional[str] = None):
        self.signature = signature
        super().__init__(message)


class ConfirmationTimeoutError(ExecutionError):
    """Transaction was sent but its confirmation never arrived."""


class ExhaustedRetriesError(SwapAgentError):
    """Every retry attempt failed."""

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Swap failed after {attempts} attempts: {last_error}")


class RetryCancelledError(SwapAgentError):
    """Shutdown was requested while waiting between retry attempts."""

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Retries cancelled after {attempts} attempts: {last_error}")
