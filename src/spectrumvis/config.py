import argparse
import string

from spectrumvis.constants import (
    BAR_COLOR,
    BG_COLOR,
    DEFAULT_FPS,
    DEFAULT_RESOLUTION,
    N_BARS,
    N_FFT,
    OVERLAP,
    SPECTRUM_HEIGHT,
    SPECTRUM_Y_FROM_BOTTOM,
)


class RenderConfig:
    """
    Output geometry, analysis settings and colours for one render.
    """

    def __init__(
        self,
        width=DEFAULT_RESOLUTION[0],
        height=DEFAULT_RESOLUTION[1],
        fps=DEFAULT_FPS,
        bars=N_BARS,
        spectrum_height=SPECTRUM_HEIGHT,
        spectrum_y_from_bottom=SPECTRUM_Y_FROM_BOTTOM,
        spectrum_width=None,
        fft_size=N_FFT,
        overlap=OVERLAP,
        bar_color=BAR_COLOR,
        bg_color=BG_COLOR,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"width and height must be positive, got {width}x{height}")
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        if fft_size <= 0:
            raise ValueError(f"fft_size must be positive, got {fft_size}")
        if bars < 0:
            raise ValueError(f"bars must not be negative, got {bars}")
        if not 0.0 <= overlap < 1.0:
            raise ValueError(f"overlap must be in [0, 1), got {overlap}")

        self.width = width
        self.height = height
        self.fps = fps
        self.bars = bars
        self.spectrum_height = spectrum_height
        self.spectrum_y_from_bottom = spectrum_y_from_bottom
        self.spectrum_width = spectrum_width
        self.fft_size = fft_size
        self.overlap = overlap
        self.bar_color = tuple(bar_color)
        self.bg_color = tuple(bg_color)

    def __repr__(self):
        return (
            f"RenderConfig({self.width}x{self.height} @ {self.fps}fps, bars={self.bars}, "
            f"fft_size={self.fft_size}, overlap={self.overlap})"
        )


def parse_hex_color(text):
    """Parse 'ff6600' or '#ff6600' into an opaque RGBA tuple."""
    digits = text[1:] if text.startswith("#") else text
    if len(digits) != 6:
        raise argparse.ArgumentTypeError(
            f"color must be 6 hex digits (e.g. ff6600), got {digits!r}"
        )
    if not all(c in string.hexdigits for c in digits):
        raise argparse.ArgumentTypeError(f"invalid hex in color: {digits!r}")
    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    return (r, g, b, 255)


def parse_resolution(text):
    """Parse 'WIDTHxHEIGHT' (e.g. 1920x1080) into a (width, height) tuple."""
    parts = text.split("x")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError("resolution must be WIDTHxHEIGHT (e.g. 1920x1080)")
    try:
        width = int(parts[0].strip())
    except ValueError:
        raise argparse.ArgumentTypeError("invalid width") from None
    try:
        height = int(parts[1].strip())
    except ValueError:
        raise argparse.ArgumentTypeError("invalid height") from None
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("width and height must be positive")
    return width, height
