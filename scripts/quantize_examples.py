import argparse
from pathlib import Path
from mediancut.config import (
    EXAMPLES_DIR, OUTPUTS_DIR, DEFAULT_PALETTE_COUNT, DEFAULT_METHOD
)
from mediancut.cli import palette_count_arg
from mediancut.errors import ImageDecodeError
from mediancut.io_utils import list_images, load_image_rgba, image_to_pixels, pixels_to_image, save_image_rgba
from mediancut.quantization.color_quantization import quantize_image

def quantize_folder(src: Path, out_dir: Path, palette_count: int, method: str) -> int:
    out_dir.mkdir(parents=True, exist_ok=True)
    written = 0
    for img_path in list_images(src):
        try:
            w, h, pixels = load_image_rgba(img_path)
        except ImageDecodeError as e:
            print(f"✗ {img_path.name}: {e.reason}")
            continue
        quant = quantize_image(pixels_to_image(pixels, w, h), palette_count, method=method)
        _, _, quant_pixels = image_to_pixels(quant)
        out = save_image_rgba(
            out_dir / f"{img_path.stem}_p{palette_count}.png", w, h, quant_pixels
        )
        print(f"✓ {img_path.name} -> {out.name}")
        written += 1
    return written

def main():
    parser = argparse.ArgumentParser(description="Quantize every image in a folder.")
    parser.add_argument("--examples", type=str, default=str(EXAMPLES_DIR), help="Folder with input images")
    parser.add_argument("--out", type=str, default=str(OUTPUTS_DIR / "quantized"), help="Output folder")
    parser.add_argument("-p", "--palette", type=palette_count_arg, default=DEFAULT_PALETTE_COUNT)
    parser.add_argument("--method", type=str, default=DEFAULT_METHOD, choices=["median_cut", "pillow"])
    args = parser.parse_args()

    n = quantize_folder(Path(args.examples), Path(args.out), args.palette, args.method)
    print(f"Wrote {n} image(s) to {args.out}")


if __name__ == "__main__":
    main()
