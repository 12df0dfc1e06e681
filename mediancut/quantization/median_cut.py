# mediancut/quantization/median_cut.py
from __future__ import annotations
from typing import MutableSequence, Union
import logging
import numpy as np

from mediancut.config import MAX_PALETTE, MIN_PALETTE
from mediancut.errors import PaletteSizeError
from .tree import PartitionTree

logger = logging.getLogger(__name__)

Pixels = Union[np.ndarray, MutableSequence]

def validate_palette_count(palette_count: int) -> int:
    if isinstance(palette_count, bool) or not isinstance(palette_count, (int, np.integer)):
        raise PaletteSizeError(palette_count, MIN_PALETTE, MAX_PALETTE)
    if not MIN_PALETTE <= palette_count <= MAX_PALETTE:
        raise PaletteSizeError(palette_count, MIN_PALETTE, MAX_PALETTE)
    return int(palette_count)

def build_tree(working: np.ndarray, palette_count: int) -> PartitionTree:
    """
    Grow a partition tree over `working` ((N, 4) uint8, reordered in place).
    Up to palette_count - 1 cuts; stops early once no leaf has any spread left.
    Leaf averages are computed before returning.
    """
    palette_count = validate_palette_count(palette_count)
    tree = PartitionTree(working, palette_count)
    for _ in range(palette_count - 1):
        index, max_range = tree.largest_leaf()
        if max_range == 0:
            logger.debug("no splittable bucket left after %d nodes", len(tree))
            break
        tree.cut(index)
    tree.freeze()
    logger.debug("palette has %d entries", sum(1 for _ in tree.leaves()))
    return tree

def _as_buffer(pixels: Pixels, width: int, height: int) -> np.ndarray:
    if width < 0 or height < 0:
        raise ValueError(f"Image size must be non-negative, got {width}x{height}")
    arr = pixels if isinstance(pixels, np.ndarray) else np.asarray(pixels, dtype=np.uint8)
    if arr.dtype != np.uint8:
        raise ValueError(f"Pixels must be uint8, got {arr.dtype}")
    if arr.size == 0 and width * height == 0:
        return arr.reshape(0, 4)
    if arr.shape[-1] != 4:
        raise ValueError(f"Pixels must have 4 channels (RGBA), got shape {arr.shape}")
    flat = arr.reshape(-1, 4)
    if flat.shape[0] != width * height:
        raise ValueError(
            f"Expected {width * height} pixels for a {width}x{height} image, got {flat.shape[0]}"
        )
    return flat

def median_cut(palette_count: int, pixels: Pixels, width: int, height: int) -> None:
    """
    Quantize `pixels` in place to at most `palette_count` colors.

    `pixels` is either a uint8 array of shape (width * height, 4) or
    (height, width, 4), or a mutable sequence of RGBA tuples. Every pixel is
    replaced by the average color of its partition, alpha 255.

    Raises PaletteSizeError unless 1 <= palette_count <= 128; this is checked
    before the pixel buffer is touched.
    """
    palette_count = validate_palette_count(palette_count)
    flat = _as_buffer(pixels, width, height)

    working = flat.copy()
    tree = build_tree(working, palette_count)

    # Routing uses the original colors; the working copy is only used to grow the tree.
    remapped = tree.lookup_many(flat)
    if isinstance(pixels, np.ndarray):
        flat[...] = remapped
        if not np.may_share_memory(flat, pixels):
            pixels[...] = remapped.reshape(pixels.shape)
    else:
        pixels[:] = [tuple(int(v) for v in c) for c in remapped]

# Public name of the core entry point.
quantize = median_cut
