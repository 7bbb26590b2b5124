from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

import numpy as np


def frozen_array(a: Any, dtype: Any = float) -> np.ndarray:
    """Return a read-only copy of `a`."""
    out = np.array(a, dtype=dtype, copy=True)
    out.setflags(write=False)
    return out


@contextmanager
def cputime(timing: Dict[str, float], key: str) -> Iterator[None]:
    """Accumulate CPU seconds spent in the block into timing[key]."""
    start = time.process_time()
    try:
        yield
    finally:
        timing[key] = timing.get(key, 0.0) + (time.process_time() - start)


def falling_factorial(e: np.ndarray, j: int) -> np.ndarray:
    """e * (e-1) * ... * (e-j+1), elementwise; zero where j > e."""
    e = np.asarray(e, dtype=float)
    out = np.ones_like(e)
    for i in range(int(j)):
        out = out * (e - i)
    return np.where(e >= j, out, 0.0)
