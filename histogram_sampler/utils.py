# Copyright 2021-2024, Gavin E. Crooks
#
# This source code is licensed under the Apache-2.0 License
# found in the LICENSE file in the root directory of this source tree.


"""
Utilities

Random generators handed to :meth:`HistogramSampler.sample` are numpy
``Generator`` objects. The sampler never creates one itself.
"""

from __future__ import annotations

import os
import secrets
from typing import Optional

import numpy as np


def resolve_seed(seed: Optional[int] = None) -> int:
    """Return ``seed``, or fresh system entropy when it is None.
    The SEED environment variable (decimal or 0x-prefixed) overrides both.
    """
    seed = secrets.randbits(63) if seed is None else seed
    if "SEED" in os.environ:  # environment variable override
        seed = int(os.environ["SEED"], 0)
    return seed


def random_generator(seed: Optional[int] = None) -> np.random.Generator:
    """Return a numpy random generator seeded via :func:`resolve_seed`."""
    return np.random.default_rng(resolve_seed(seed))
