# mediancut/errors.py
from pathlib import Path
from typing import Union

class QuantizationError(Exception):
    """Base exception for mediancut errors."""

class PaletteSizeError(QuantizationError, ValueError):
    """Requested palette size is outside the supported range."""
    def __init__(self, palette_count: int, low: int, high: int):
        self.palette_count = palette_count
        super().__init__(f"palette_count must be between {low} and {high}, got {palette_count}")

class ImageDecodeError(QuantizationError):
    """An image file could not be read; `reason` says why."""
    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot parse image '{path}': {reason}")

class ImageEncodeError(QuantizationError):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"cannot write image '{path}'")
