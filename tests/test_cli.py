"""Tests for the mediancut command line."""

import numpy as np
import pytest
from PIL import Image

from mediancut.cli import create_parser, main


@pytest.fixture
def input_png(tmp_path):
    rng = np.random.default_rng(1)
    arr = rng.integers(0, 256, size=(12, 10, 4), dtype=np.uint8)
    path = tmp_path / "in.png"
    Image.fromarray(arr).save(path)
    return path


class TestArguments:
    def test_default_palette(self):
        parsed = create_parser().parse_args(["a.png", "b.png"])
        assert parsed.palette_count == 4

    def test_help_goes_to_stdout(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--help"])
        assert exc.value.code == 0
        out, err = capsys.readouterr()
        assert "usage: mediancut" in out
        assert "median cut" in out
        assert err == ""

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["only-input.png"],
            ["a.png", "b.png", "c.png"],
            ["-p", "0", "a.png", "b.png"],
            ["-p", "-3", "a.png", "b.png"],
            ["-p", "129", "a.png", "b.png"],
            ["-p", "abc", "a.png", "b.png"],
            ["-p", "1_0", "a.png", "b.png"],
            ["-p", " 5", "a.png", "b.png"],
            ["-p", "5x", "a.png", "b.png"],
            ["--bogus", "a.png", "b.png"],
        ],
    )
    def test_invalid_arguments_print_usage_to_stderr(self, argv, capsys):
        with pytest.raises(SystemExit) as exc:
            main(argv)
        assert exc.value.code != 0
        out, err = capsys.readouterr()
        assert "usage: mediancut" in err
        assert out == ""


class TestRun:
    @pytest.mark.parametrize("name", ["out.bmp", "out", "out.jpg"])
    def test_output_written_at_given_path(self, input_png, tmp_path, name):
        output = tmp_path / name
        assert main(["-p", "4", str(input_png), str(output)]) == 0
        assert sorted(p.name for p in tmp_path.iterdir()) == sorted(["in.png", name])
        with Image.open(output) as im:
            assert im.format == "PNG"
            arr = np.array(im.convert("RGBA"))
        assert np.unique(arr.reshape(-1, 4), axis=0).shape[0] <= 4

    def test_plus_sign_accepted(self):
        assert create_parser().parse_args(["-p", "+8", "a.png", "b.png"]).palette_count == 8

    def test_quantizes_image(self, input_png, tmp_path):
        output = tmp_path / "out.png"
        assert main(["-p", "3", str(input_png), str(output)]) == 0
        with Image.open(output) as im:
            arr = np.array(im.convert("RGBA"))
        assert arr.shape == (12, 10, 4)
        assert np.unique(arr.reshape(-1, 4), axis=0).shape[0] <= 3
        assert (arr[..., 3] == 255).all()

    def test_report(self, input_png, tmp_path, capsys):
        assert main(["--report", "-p", "8", str(input_png), str(tmp_path / "out.png")]) == 0
        out = capsys.readouterr().out
        assert "Colors:" in out
        assert "MSE:" in out
        assert "SSIM:" in out

    def test_unreadable_input(self, tmp_path, capsys):
        missing = tmp_path / "missing.png"
        assert main([str(missing), str(tmp_path / "out.png")]) == 1
        err = capsys.readouterr().err
        assert err.startswith("mediancut: cannot parse image")
        assert not (tmp_path / "out.png").exists()

    def test_unwritable_output(self, input_png, tmp_path, capsys):
        (tmp_path / "file").write_text("x")
        assert main([str(input_png), str(tmp_path / "file" / "out.png")]) == 1
        assert "cannot write image" in capsys.readouterr().err
