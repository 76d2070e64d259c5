#!/usr/bin/env python3
"""
Audio Spectrum Video CLI Tool
=============================

Generates an MP4 showing a row of rounded spectrum bars that follow the
loudness of log-spaced frequency bands of an audio file. Audio is analysed
up front with a windowed FFT, frames are rasterised with NumPy/OpenCV and
encoded with MoviePy.

Usage:
    python -m spectrumvis input.mp3 --output result.mp4
    python -m spectrumvis input.mp3 -o result.mp4 --bars 64 --bar-color ff6600
    python -m spectrumvis -h (for help)
"""

import argparse
import logging
import os
import sys
import tempfile

from moviepy import AudioFileClip, VideoClip

from spectrumvis.audio_analyser import AudioAnalyser
from spectrumvis.audio_io import write_wav
from spectrumvis.config import RenderConfig, parse_hex_color, parse_resolution
from spectrumvis.constants import (
    DEFAULT_FPS,
    DEFAULT_RESOLUTION,
    N_BARS,
    N_FFT,
    OVERLAP,
    SPECTRUM_HEIGHT,
    SPECTRUM_Y_FROM_BOTTOM,
)
from spectrumvis.visualiser_renderer import VisualiserRenderer, load_background_image, save_frame

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="spectrumvis",
        description="Generate an audio spectrum video (MP4) from an audio file.",
    )
    parser.add_argument("input", help="Path to input audio file (MP3/WAV/...)")
    parser.add_argument("--output", "-o", default="output.mp4", help="Path to output video file")
    parser.add_argument(
        "--resolution",
        type=parse_resolution,
        help="Resolution, e.g. 1920x1080. Overrides --width / --height when set",
    )
    parser.add_argument("--width", type=int, default=DEFAULT_RESOLUTION[0], help="Video width")
    parser.add_argument("--height", type=int, default=DEFAULT_RESOLUTION[1], help="Video height")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Frames per second")
    parser.add_argument("--bars", type=int, default=N_BARS, help="Number of spectrum bars")
    parser.add_argument(
        "--spectrum-height", type=int, default=SPECTRUM_HEIGHT, help="Spectrum band height (pixels)"
    )
    parser.add_argument(
        "--bar-color",
        type=parse_hex_color,
        default="000000",
        help="Bar color in hex RGB (e.g. 000000 or #ff6600)",
    )
    parser.add_argument(
        "--bg-color",
        type=parse_hex_color,
        default="ffffff",
        help="Background color in hex RGB (e.g. ffffff or #1a1a2e)",
    )
    parser.add_argument(
        "--bg-image",
        help="Background image path. Resized to video size if needed. Overrides --bg-color",
    )
    parser.add_argument(
        "--spectrum-y-from-bottom",
        type=int,
        default=SPECTRUM_Y_FROM_BOTTOM,
        help="Distance from bottom of frame to the bottom edge of the spectrum band (pixels)",
    )
    parser.add_argument(
        "--spectrum-width",
        type=int,
        help="Horizontal width of the spectrum band (pixels). Centered. Defaults to full width",
    )
    parser.add_argument("--fft-size", type=int, default=N_FFT, help="FFT window size (samples)")
    parser.add_argument(
        "--overlap", type=float, default=OVERLAP, help="Analysis window overlap in [0, 1)"
    )
    parser.add_argument("--duration", type=float, help="Limit duration in seconds (optional)")
    parser.add_argument("--frames-dir", help="Also save every rendered frame as PNG here")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def config_from_args(args):
    width, height = args.resolution or (args.width, args.height)
    return RenderConfig(
        width=width,
        height=height,
        fps=args.fps,
        bars=args.bars,
        spectrum_height=args.spectrum_height,
        spectrum_y_from_bottom=args.spectrum_y_from_bottom,
        spectrum_width=args.spectrum_width,
        fft_size=args.fft_size,
        overlap=args.overlap,
        bar_color=args.bar_color,
        bg_color=args.bg_color,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    # 1. Validation
    if not os.path.exists(args.input):
        sys.exit(f"[!] Input file not found: {args.input}")
    try:
        config = config_from_args(args)
    except ValueError as e:
        sys.exit(f"[!] Invalid configuration: {e}")

    bg_image = None
    if args.bg_image:
        try:
            bg_image = load_background_image(args.bg_image, config.width, config.height)
        except ValueError as e:
            sys.exit(f"[!] {e}")
        logger.info(f"[+] Using background image: {args.bg_image}")

    # 2. Analyze Audio
    analyser = AudioAnalyser(
        args.input, fft_size=config.fft_size, overlap=config.overlap, bars=config.bars
    )

    # 3. Setup Video Generation
    duration = analyser.duration
    if args.duration and args.duration < duration:
        duration = args.duration
        logger.info(f"[i] Truncating duration to {duration} seconds.")

    renderer = VisualiserRenderer(analyser, config, bg_image)
    logger.info(f"[+] Preparing render: {config.width}x{config.height} @ {config.fps}fps")
    logger.info(
        f"[+] Spectrum frames: {len(analyser.frame_spectrums)}, "
        f"total video frames: {renderer.total_frames}"
    )
    logger.info(f"[+] Duration: {duration:.2f} seconds")

    if args.frames_dir:
        os.makedirs(args.frames_dir, exist_ok=True)

    def make_frame_wrapper(t):
        if args.frames_dir:
            frame_index = renderer.frame_index_at(t)
            path = os.path.join(args.frames_dir, f"frame_{frame_index:06d}.png")
            save_frame(path, renderer.render_frame(frame_index))
        return renderer.make_frame(t)

    with tempfile.TemporaryDirectory(prefix="spectrumvis-") as temp_dir:
        # Attach the decoded mono mix as the soundtrack
        wav_path = os.path.join(temp_dir, "audio.wav")
        logger.info(f"[+] Writing WAV: {wav_path}")
        write_wav(wav_path, analyser.y, analyser.sr)

        video_clip = VideoClip(make_frame_wrapper, duration=duration)
        audio_clip = AudioFileClip(wav_path)
        audio_clip = audio_clip.subclipped(0, min(duration, audio_clip.duration))
        video_clip = video_clip.with_audio(audio_clip)

        # 4. Export
        logger.info("[+] Rendering video... (This may take a while)")
        try:
            video_clip.write_videofile(
                args.output,
                fps=config.fps,
                codec="libx264",
                audio_codec="aac",
                preset="medium",
                logger="bar",
            )
        except (OSError, RuntimeError) as e:
            sys.exit(f"[!] Encoding failed: {e}")
        finally:
            audio_clip.close()
            video_clip.close()

    logger.info(f"[+] Done! Saved to {args.output}")


if __name__ == "__main__":
    main()
