"""
Tests for render configuration and command-line parsing.
"""
import argparse

import pytest

from spectrumvis.__main__ import build_parser, config_from_args, main
from spectrumvis.config import RenderConfig, parse_hex_color, parse_resolution
from spectrumvis.constants import BAR_COLOR, BG_COLOR, N_BARS, N_FFT, OVERLAP


class TestParseHexColor:
    """Tests for hex colour parsing."""

    def test_with_hash(self):
        assert parse_hex_color("#ff6600") == (255, 102, 0, 255)

    def test_without_hash(self):
        assert parse_hex_color("000000") == (0, 0, 0, 255)

    def test_white(self):
        assert parse_hex_color("ffffff") == (255, 255, 255, 255)

    def test_upper_case(self):
        assert parse_hex_color("1A1A2E") == (26, 26, 46, 255)

    def test_too_short(self):
        with pytest.raises(argparse.ArgumentTypeError, match="6 hex digits"):
            parse_hex_color("ff00")

    def test_too_long(self):
        with pytest.raises(argparse.ArgumentTypeError, match="6 hex digits"):
            parse_hex_color("1234567")

    def test_invalid_char(self):
        with pytest.raises(argparse.ArgumentTypeError, match="invalid hex"):
            parse_hex_color("ff00gg")

    def test_sign_is_not_hex(self):
        with pytest.raises(argparse.ArgumentTypeError, match="invalid hex"):
            parse_hex_color("+f0000")


class TestParseResolution:
    """Tests for WIDTHxHEIGHT parsing."""

    def test_ok(self):
        assert parse_resolution("1920x1080") == (1920, 1080)

    def test_with_spaces(self):
        assert parse_resolution(" 640 x 480 ") == (640, 480)

    def test_zero_width(self):
        with pytest.raises(argparse.ArgumentTypeError, match="positive"):
            parse_resolution("0x1080")

    def test_zero_height(self):
        with pytest.raises(argparse.ArgumentTypeError, match="positive"):
            parse_resolution("1920x0")

    def test_invalid_format(self):
        with pytest.raises(argparse.ArgumentTypeError, match="WIDTHxHEIGHT"):
            parse_resolution("1920")

    def test_invalid_number(self):
        with pytest.raises(argparse.ArgumentTypeError, match="invalid"):
            parse_resolution("axb")


class TestRenderConfig:
    """Tests for RenderConfig defaults and validation."""

    def test_defaults(self):
        config = RenderConfig()
        assert (config.width, config.height) == (1920, 1080)
        assert config.fps == 30
        assert config.bars == N_BARS
        assert config.fft_size == N_FFT
        assert config.overlap == OVERLAP
        assert config.spectrum_width is None
        assert config.bar_color == BAR_COLOR
        assert config.bg_color == BG_COLOR

    def test_zero_bars_allowed(self):
        assert RenderConfig(bars=0).bars == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": -1},
            {"fps": 0},
            {"fft_size": 0},
            {"bars": -1},
            {"overlap": 1.0},
            {"overlap": -0.1},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            RenderConfig(**kwargs)


class TestCommandLine:
    """Tests for argument parsing into a RenderConfig."""

    def test_defaults(self):
        args = build_parser().parse_args(["in.mp3"])
        config = config_from_args(args)
        assert args.output == "output.mp4"
        assert (config.width, config.height) == (1920, 1080)
        assert config.bar_color == (0, 0, 0, 255)
        assert config.bg_color == (255, 255, 255, 255)

    def test_resolution_overrides_width_height(self):
        args = build_parser().parse_args(
            ["in.mp3", "--width", "100", "--height", "50", "--resolution", "640x480"]
        )
        config = config_from_args(args)
        assert (config.width, config.height) == (640, 480)

    def test_spectrum_options(self):
        args = build_parser().parse_args(
            [
                "in.mp3",
                "--bars", "64",
                "--spectrum-height", "120",
                "--spectrum-width", "800",
                "--spectrum-y-from-bottom", "40",
                "--bar-color", "#ff6600",
                "--bg-color", "1a1a2e",
            ]
        )
        config = config_from_args(args)
        assert config.bars == 64
        assert config.spectrum_height == 120
        assert config.spectrum_width == 800
        assert config.spectrum_y_from_bottom == 40
        assert config.bar_color == (255, 102, 0, 255)
        assert config.bg_color == (26, 26, 46, 255)

    def test_bad_color_is_usage_error(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["in.mp3", "--bar-color", "zzz"])

    def test_missing_input_exits(self, tmp_path):
        with pytest.raises(SystemExit, match="Input file not found"):
            main([str(tmp_path / "missing.mp3")])

    def test_invalid_overlap_exits(self, tmp_path):
        path = tmp_path / "in.wav"
        path.write_bytes(b"")
        with pytest.raises(SystemExit, match="Invalid configuration"):
            main([str(path), "--overlap", "1.5"])
