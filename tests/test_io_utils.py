import numpy as np
import pytest
from PIL import Image

from mediancut.errors import ImageDecodeError, ImageEncodeError
from mediancut.io_utils import image_to_pixels, list_images, load_image_rgba, pixels_to_image, save_image_rgba

def _rgba(w, h, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(w * h, 4), dtype=np.uint8)

def test_png_round_trip(tmp_path):
    pixels = _rgba(7, 5)
    out = save_image_rgba(tmp_path / "a.png", 7, 5, pixels)
    w, h, loaded = load_image_rgba(out)
    assert (w, h) == (7, 5)
    np.testing.assert_array_equal(loaded, pixels)

def test_load_rgb_file_gets_opaque_alpha(tmp_path):
    Image.new("RGB", (3, 2), (10, 20, 30)).save(tmp_path / "rgb.png")
    w, h, pixels = load_image_rgba(tmp_path / "rgb.png")
    assert (w, h) == (3, 2)
    assert pixels.shape == (6, 4)
    assert (pixels == [10, 20, 30, 255]).all()

@pytest.mark.parametrize("name", ["a.jpg", "a.bmp", "a.xyz", "a"])
def test_writes_png_at_exact_path(tmp_path, name):
    pixels = _rgba(4, 3, seed=2)
    out = save_image_rgba(tmp_path / "sub" / name, 4, 3, pixels)
    assert out == tmp_path / "sub" / name
    assert [p.name for p in (tmp_path / "sub").iterdir()] == [name]
    with Image.open(out) as im:
        assert im.format == "PNG"
    _, _, loaded = load_image_rgba(out)
    np.testing.assert_array_equal(loaded, pixels)

def test_oversized_image_is_a_decode_error(tmp_path, monkeypatch):
    Image.new("RGB", (100, 100)).save(tmp_path / "big.png")
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(ImageDecodeError, match="cannot parse image"):
        load_image_rgba(tmp_path / "big.png")

def test_missing_file(tmp_path):
    with pytest.raises(ImageDecodeError, match="cannot parse image"):
        load_image_rgba(tmp_path / "missing.png")

def test_garbage_file_reports_reason(tmp_path):
    p = tmp_path / "bad.png"
    p.write_bytes(b"not an image")
    with pytest.raises(ImageDecodeError) as exc:
        load_image_rgba(p)
    assert exc.value.reason
    assert exc.value.path == p

def test_unwritable_output(tmp_path):
    (tmp_path / "file").write_text("x")
    with pytest.raises(ImageEncodeError):
        save_image_rgba(tmp_path / "file" / "out.png", 2, 2, _rgba(2, 2))

def test_image_to_pixels_adds_alpha():
    img = np.full((2, 3, 3), 9, dtype=np.uint8)
    w, h, pixels = image_to_pixels(img)
    assert (w, h) == (3, 2)
    assert (pixels == [9, 9, 9, 255]).all()
    np.testing.assert_array_equal(pixels_to_image(pixels, w, h)[..., :3], img)

def test_image_to_pixels_rejects_gray():
    with pytest.raises(ValueError):
        image_to_pixels(np.zeros((2, 2), dtype=np.uint8))

def test_list_images(tmp_path):
    for name in ["b.png", "a.JPG", "notes.txt"]:
        (tmp_path / name).write_bytes(b"")
    assert [p.name for p in list_images(tmp_path)] == ["a.JPG", "b.png"]
