import logging

import cv2
import numpy as np

from spectrumvis.constants import BAND_MARGIN, BAR_GAP, MAX_CORNER_RADIUS, MIN_CORNER_RADIUS

logger = logging.getLogger(__name__)


def point_in_rounded_rect(px, py, x0, y0, w, h, r):
    """
    Pixel hit test for a rectangle with all four corners rounded by `r`.

    `px`/`py` may be plain ints or broadcastable numpy coordinate arrays, in
    which case a boolean mask is returned.
    """
    x1 = x0 + w
    y1 = y0 + h
    if r == 0:
        return (px >= x0) & (px < x1) & (py >= y0) & (py < y1)

    in_center = (px >= x0 + r) & (px < x1 - r) & (py >= y0) & (py < y1)
    in_middle_vertical = (px >= x0) & (px < x1) & (py >= y0 + r) & (py < y1 - r)
    inside = in_center | in_middle_vertical

    corners = (
        (x0 + r, y0 + r),
        (x1 - r - 1, y0 + r),
        (x0 + r, y1 - r - 1),
        (x1 - r - 1, y1 - r - 1),
    )
    for cx, cy in corners:
        inside = inside | ((px - cx) ** 2 + (py - cy) ** 2 <= r * r)
    return inside


def draw_rounded_rect(canvas, x0, y0, w, h, r, color):
    """Fill a rounded rectangle on an RGBA canvas; pixels off the canvas are dropped."""
    height, width = canvas.shape[:2]
    r = min(r, w // 2, h // 2)
    x_end = min(x0 + w, width)
    y_end = min(y0 + h, height)
    if x0 >= x_end or y0 >= y_end:
        return

    py, px = np.ogrid[y0:y_end, x0:x_end]
    mask = point_in_rounded_rect(px, py, x0, y0, w, h, r)
    canvas[y0:y_end, x0:x_end][mask] = color


def corner_radius(bar_width):
    return min(max(bar_width // 2, MIN_CORNER_RADIUS), MAX_CORNER_RADIUS)


def _to_rgba(image):
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2RGBA)
    return image


def make_background(width, height, bg_color, bg_image=None):
    """
    Returns a fresh (height, width, 4) canvas: a copy of `bg_image` (resized
    if its size differs) or a solid `bg_color` fill.
    """
    if bg_image is None:
        return np.full((height, width, 4), bg_color, dtype=np.uint8)

    canvas = _to_rgba(np.asarray(bg_image, dtype=np.uint8))
    if canvas.shape[:2] != (height, width):
        canvas = cv2.resize(canvas, (width, height), interpolation=cv2.INTER_LINEAR)
    return canvas.copy()


def load_background_image(path, width, height):
    """Read an image file as an RGBA canvas of the given size."""
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError(f"failed to read background image {path}")
    image = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    if image.shape[:2] != (height, width):
        logger.info(f"[i] Resizing background from {image.shape[1]}x{image.shape[0]}")
    return make_background(width, height, None, image)


def save_frame(path, canvas):
    """Write an RGBA canvas to an image file (PNG by extension)."""
    if not cv2.imwrite(str(path), cv2.cvtColor(canvas, cv2.COLOR_RGBA2BGRA)):
        raise OSError(f"failed to write frame {path}")


def draw_spectrum_frame(
    width,
    height,
    spectrum_height,
    spectrum_y_from_bottom,
    spectrum_width,
    bar_heights,
    bar_color,
    bg_color,
    bg_image=None,
):
    """
    Draw one frame: background (image or solid colour), then rounded bars.

    `bar_heights` are expected in [0, 1]. The band's bottom edge sits
    `spectrum_y_from_bottom` pixels above the frame bottom and every bar is
    centred vertically on the band's middle line. The row of bars is
    `spectrum_width` pixels wide (full width when None) and centred on the
    frame.
    """
    canvas = make_background(width, height, bg_color, bg_image)

    bar_heights = np.asarray(bar_heights, dtype=np.float32)
    if bar_heights.size == 0:
        return canvas

    usable_height = max(0, spectrum_height - BAND_MARGIN)
    y_center = max(0, max(0, height - spectrum_y_from_bottom) - spectrum_height // 2)

    total_bars = len(bar_heights)
    total_gaps = (total_bars - 1) * BAR_GAP
    strip_width = min(width if spectrum_width is None else spectrum_width, width)
    bar_width = (strip_width - total_gaps) // total_bars if strip_width > total_gaps else 0
    radius = corner_radius(bar_width)
    start_x = max(0, width - (total_bars * bar_width + total_gaps)) // 2

    for i, value in enumerate(bar_heights):
        bar_height = int(min(max(float(value), 0.0), 1.0) * usable_height)
        if bar_height == 0:
            continue

        x0 = start_x + i * (bar_width + BAR_GAP)
        y_top = max(0, y_center - bar_height // 2)
        draw_rounded_rect(canvas, x0, y_top, bar_width, bar_height, radius, bar_color)

    return canvas


class VisualiserRenderer:
    """
    Renders output video frames from an analysed track.
    Holds the background so it is built once per render.
    """

    def __init__(self, analyser, config, bg_image=None):
        self.analyser = analyser
        self.config = config
        self.w = config.width
        self.h = config.height
        self.fps = config.fps
        self.total_frames = analyser.total_video_frames(config.fps)
        self.background = make_background(self.w, self.h, config.bg_color, bg_image)

    def render_frame(self, frame_index):
        """RGBA canvas for output video frame `frame_index`."""
        bar_heights = self.analyser.get_bars_for_frame(frame_index, self.total_frames)
        return draw_spectrum_frame(
            self.w,
            self.h,
            self.config.spectrum_height,
            self.config.spectrum_y_from_bottom,
            self.config.spectrum_width,
            bar_heights,
            self.config.bar_color,
            self.config.bg_color,
            self.background,
        )

    def frame_index_at(self, t):
        return min(int(round(t * self.fps)), self.total_frames - 1)

    def make_frame(self, t):
        """
        The callback function for MoviePy.
        Generates a single RGB video frame at time t.
        """
        canvas = self.render_frame(self.frame_index_at(t))
        return cv2.cvtColor(canvas, cv2.COLOR_RGBA2RGB)
