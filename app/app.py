# app/app.py
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

import time
import numpy as np
import gradio as gr

from mediancut.config import DEFAULT_PALETTE_COUNT, MAX_PALETTE, MIN_PALETTE, OUTPUTS_DIR
from mediancut.io_utils import image_to_pixels, save_image_rgba
from mediancut.metrics.similarity import quality_report
from mediancut.quantization.color_quantization import palette_of, quantize_image

SWATCH = 24  # swatch cell size (px)

def palette_swatch(img_rgba: np.ndarray, max_colors: int = MAX_PALETTE) -> np.ndarray:
    """One square per palette color, most frequent first, in rows of 16."""
    colors = [c for c, _ in palette_of(img_rgba)][:max_colors]
    if not colors:
        return np.zeros((SWATCH, SWATCH, 4), dtype=np.uint8)
    cols = min(len(colors), 16)
    rows = (len(colors) + cols - 1) // cols
    out = np.zeros((rows * SWATCH, cols * SWATCH, 4), dtype=np.uint8)
    for i, c in enumerate(colors):
        y, x = divmod(i, cols)
        out[y * SWATCH:(y + 1) * SWATCH, x * SWATCH:(x + 1) * SWATCH] = c
    return out

# --------- core handlers ----------
def run_quantize(image: np.ndarray, palette_count: int, method: str, save: bool):
    if image is None:
        return None, None, {"error": "Upload an image first."}

    t0 = time.perf_counter()
    quant = quantize_image(image, int(palette_count), method=method)
    runtime_ms = (time.perf_counter() - t0) * 1000.0

    _, _, original = image_to_pixels(image)
    h, w = image.shape[:2]
    metrics = quality_report(original.reshape(h, w, 4), quant)
    metrics.update({
        "requested_colors": int(palette_count),
        "method": method,
        "runtime_ms": round(runtime_ms, 2),
    })

    if save:
        _, _, pixels = image_to_pixels(quant)
        out = save_image_rgba(OUTPUTS_DIR / f"quantized_{method}_p{int(palette_count)}.png", w, h, pixels)
        metrics["saved_to"] = str(out)

    return quant, palette_swatch(quant), metrics

# --------- UI ----------
with gr.Blocks(title="Median Cut Quantizer") as demo:
    gr.Markdown("## Median Cut Quantizer\nReduce an image to a small palette and inspect the result.")

    with gr.Row():
        with gr.Column(scale=1, min_width=320):
            in_img = gr.Image(type="numpy", image_mode="RGBA", label="Upload image")
            palette_count = gr.Slider(
                MIN_PALETTE, MAX_PALETTE, value=DEFAULT_PALETTE_COUNT, step=1, label="Palette size"
            )
            method = gr.Radio(
                choices=["median_cut", "pillow"], value="median_cut", label="Method",
                info="median_cut = this package, pillow = Pillow's median cut for comparison"
            )
            save = gr.Checkbox(value=False, label="Save result to data/outputs")
            run_btn = gr.Button("Quantize", variant="primary")
        with gr.Column(scale=2):
            out_img = gr.Image(type="numpy", label="Quantized")
            swatch_img = gr.Image(type="numpy", label="Palette")
            metrics_json = gr.JSON(label="Metrics (palette size, MSE, SSIM, runtime)")

    run_btn.click(
        fn=run_quantize,
        inputs=[in_img, palette_count, method, save],
        outputs=[out_img, swatch_img, metrics_json],
    )

if __name__ == "__main__":
    demo.launch(server_name="0.0.0.0", server_port=7860)
