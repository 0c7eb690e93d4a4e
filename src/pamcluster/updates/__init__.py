"""Medoid update strategies."""

from .swap import PAMSwapUpdater, NOTHING_TO_SWAP

__all__ = [
    'PAMSwapUpdater',
    'NOTHING_TO_SWAP'
]
