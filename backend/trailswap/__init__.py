"""
TrailSwap - unattended two-asset stop-loss swap agent.

Holds either the tracked asset (A) or the quote asset (B) and flips between
them when the tracked price crosses a (optionally trailing) stop-loss price.
"""

__version__ = "1.0.0"
