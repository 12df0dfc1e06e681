from pathlib import Path
from typing import Tuple, Union
import cv2
import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from mediancut.errors import ImageDecodeError, ImageEncodeError

# Pillow decodes (it reports why a file is unreadable); cv2 encodes, which wants BGRA.
def load_image_rgba(path: Union[str, Path]) -> Tuple[int, int, np.ndarray]:
    """Decode an image into (width, height, pixels) with pixels as an (N, 4) uint8 array."""
    path = Path(path)
    try:
        with Image.open(path) as im0:
            im = ImageOps.exif_transpose(im0).convert("RGBA")
    except FileNotFoundError:
        raise ImageDecodeError(path, "file not found") from None
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageDecodeError(path, str(e)) from e
    w, h = im.size
    pixels = np.array(im, dtype=np.uint8).reshape(-1, 4)
    return w, h, pixels

def save_image_rgba(path: Union[str, Path], width: int, height: int, pixels: np.ndarray) -> Path:
    """
    Write an (N, 4) RGBA buffer as PNG to exactly `path`, whatever its suffix.
    Returns the path written.
    """
    path = Path(path)
    img = pixels_to_image(pixels, width, height)
    try:
        img_bgra = cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA)
        ok, buf = cv2.imencode(".png", img_bgra)
        if not ok:
            raise ImageEncodeError(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(buf.tobytes())
    except (OSError, cv2.error) as e:
        raise ImageEncodeError(path) from e
    return path

def pixels_to_image(pixels: np.ndarray, width: int, height: int) -> np.ndarray:
    """(N, 4) buffer -> (H, W, 4) array (a view when possible)."""
    return np.asarray(pixels, dtype=np.uint8).reshape(height, width, 4)

def image_to_pixels(img: np.ndarray) -> Tuple[int, int, np.ndarray]:
    """
    (H, W, 3|4) array -> (width, height, (N, 4) buffer). RGB input gets opaque alpha.
    Always returns a new array.
    """
    if img.ndim != 3 or img.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3) or (H, W, 4) image, got shape {img.shape}")
    h, w = img.shape[:2]
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[..., :3] = img[..., :3]
    rgba[..., 3] = img[..., 3] if img.shape[2] == 4 else 255
    return w, h, rgba.reshape(-1, 4)

def list_images(folder: Union[str, Path]) -> list[Path]:
    folder = Path(folder)
    exts = (".jpg", ".jpeg", ".png", ".bmp", ".webp", ".gif", ".tga")
    return sorted([p for p in folder.iterdir() if p.suffix.lower() in exts])
