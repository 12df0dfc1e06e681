# mediancut/quantization/average.py
from __future__ import annotations
from typing import Iterable, Tuple
import numpy as np

Color = Tuple[int, int, int, int]

CHANNELS = 3
OPAQUE = 255

def incremental_mean(values: Iterable[int], count: int) -> Tuple[int, int]:
    """
    Exact mean of `count` non-negative integers as (whole, remainder), so that
    mean == whole + remainder / count with 0 <= remainder < count.
    Each element contributes v // count to the whole part; v % count goes to the
    remainder, which carries into the whole part once it reaches count.
    """
    whole = 0
    rem = 0
    for v in values:
        whole += v // count
        b = v % count
        if rem >= count - b:
            whole += 1
            rem -= count - b
        else:
            rem += b
    return whole, rem

def channel_mean(values: np.ndarray) -> int:
    """
    Floor of the mean of a uint8 column, same result as incremental_mean.
    Quotients and remainders are summed separately; every remainder is below
    min(count, 256), so neither sum can overflow uint64 for any buffer that fits
    in memory.
    """
    count = values.shape[0]
    v = values.astype(np.uint64)
    whole = int((v // np.uint64(count)).sum(dtype=np.uint64))
    rem = int((v % np.uint64(count)).sum(dtype=np.uint64))
    # carry
    whole += rem // count
    return whole

def compute_average_color(pixels: np.ndarray) -> Color:
    """
    Average color of an (N, 4) uint8 pixel range. Alpha is always 255.
    An empty range gives (0, 0, 0, 255).
    """
    if pixels.shape[0] == 0:
        return (0, 0, 0, OPAQUE)
    r, g, b = (channel_mean(pixels[:, c]) for c in range(CHANNELS))
    return (r, g, b, OPAQUE)
