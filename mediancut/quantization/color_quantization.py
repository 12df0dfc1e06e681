from typing import List, Literal, Tuple
import numpy as np
from PIL import Image

from mediancut.io_utils import image_to_pixels, pixels_to_image
from .average import Color
from .median_cut import median_cut, validate_palette_count

QuantMethod = Literal["median_cut", "pillow"]

def quantize_image(
    img: np.ndarray,
    palette_count: int,
    method: QuantMethod = "median_cut",
) -> np.ndarray:
    """
    Quantize an (H, W, 3) or (H, W, 4) uint8 image and return a new (H, W, 4) array.
    - "median_cut": this package's median cut (alpha forced to 255)
    - "pillow": Pillow's median cut palette, for comparison
    The input array is not modified.
    """
    palette_count = validate_palette_count(palette_count)
    w, h, pixels = image_to_pixels(img)

    if method == "median_cut":
        median_cut(palette_count, pixels, w, h)
        return pixels_to_image(pixels, w, h)

    if method == "pillow":
        pil = Image.fromarray(np.ascontiguousarray(pixels_to_image(pixels, w, h)[..., :3]))
        pal = pil.quantize(colors=palette_count, method=Image.Quantize.MEDIANCUT)
        return np.array(pal.convert("RGBA"))

    raise ValueError(f"Unknown quantization method: {method}")

def palette_of(pixels: np.ndarray) -> List[Tuple[Color, int]]:
    """Distinct colors of an (..., 4) buffer with pixel counts, most frequent first."""
    flat = np.asarray(pixels, dtype=np.uint8).reshape(-1, 4)
    if flat.shape[0] == 0:
        return []
    colors, counts = np.unique(flat, axis=0, return_counts=True)
    order = np.argsort(-counts, kind="stable")
    return [(tuple(int(v) for v in colors[i]), int(counts[i])) for i in order]
