# mediancut/metrics/similarity.py
from __future__ import annotations
from typing import Dict
import numpy as np
from skimage.metrics import structural_similarity as ssim

# Gaussian-weighted SSIM uses an 11x11 window.
_GAUSSIAN_WIN = 11

def _rgb(img: np.ndarray) -> np.ndarray:
    return img[..., :3] if img.ndim == 3 else img

def mse(a: np.ndarray, b: np.ndarray) -> float:
    """Mean squared error over the RGB channels (alpha ignored)."""
    a32 = _rgb(a).astype(np.float32)
    b32 = _rgb(b).astype(np.float32)
    return float(np.mean((a32 - b32) ** 2))

def ssim_rgb(a: np.ndarray, b: np.ndarray) -> float:
    """
    SSIM over the RGB channels of two (H, W, C) images. Images smaller than the
    gaussian window fall back to a uniform window; below 3x3 SSIM is undefined
    and nan is returned.
    """
    a_f = (_rgb(a).astype(np.float32) / 255.0).clip(0, 1)
    b_f = (_rgb(b).astype(np.float32) / 255.0).clip(0, 1)
    side = min(a_f.shape[0], a_f.shape[1])
    if side >= _GAUSSIAN_WIN:
        val = ssim(a_f, b_f, channel_axis=2, data_range=1.0, gaussian_weights=True, use_sample_covariance=False)
    elif side >= 3:
        win = side if side % 2 == 1 else side - 1
        val = ssim(a_f, b_f, channel_axis=2, data_range=1.0, win_size=win)
    else:
        return float("nan")
    return float(val)

def quality_report(original: np.ndarray, quantized: np.ndarray) -> Dict[str, float]:
    """Palette size of `quantized` plus MSE/SSIM against `original` ((H, W, 4) arrays)."""
    flat = quantized.reshape(-1, quantized.shape[-1])
    colors = int(np.unique(flat, axis=0).shape[0]) if flat.shape[0] else 0
    return {
        "palette_size": colors,
        "mse": round(mse(original, quantized), 4),
        "ssim": round(ssim_rgb(original, quantized), 4),
    }
