from pathlib import Path

# Project roots
ROOT = Path(__file__).resolve().parents[1]
EXAMPLES_DIR = ROOT / "app" / "examples"
OUTPUTS_DIR = ROOT / "data" / "outputs"

PROG = "mediancut"

# Palette limits
# The partition tree holds at most 2 * MAX_PALETTE - 1 nodes.
MIN_PALETTE = 1
MAX_PALETTE = 128
DEFAULT_PALETTE_COUNT = 4

# Quantization defaults
# Options: "median_cut", "pillow"
DEFAULT_METHOD = "median_cut"
