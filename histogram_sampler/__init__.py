"""Sample values from a distribution approximated by a histogram."""

from .sampler import Bin, HistogramSampler, InvalidInput, RandomSource

__all__ = ["Bin", "HistogramSampler", "InvalidInput", "RandomSource"]
