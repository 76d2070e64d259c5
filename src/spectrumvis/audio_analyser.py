import functools
import logging
import math
import sys

import librosa
import numpy as np

from spectrumvis.audio_io import decode_audio
from spectrumvis.constants import N_BARS, N_FFT, OVERLAP

logger = logging.getLogger(__name__)


def hann_window(i, n):
    """
    Hann-family taper coefficient for sample `i` of an `n`-sample frame.
    The +1 offsets keep both ends strictly above zero.
    """
    x = math.pi * (i + 1) / (n + 1)
    return 0.5 * (1.0 - math.cos(x))


def hann_window_coefficients(n):
    """Vectorised `hann_window` for i = 0..n-1."""
    i = np.arange(n, dtype=np.float64)
    return 0.5 * (1.0 - np.cos(np.pi * (i + 1) / (n + 1)))


def compute_magnitudes(frame):
    """
    Window a frame of real samples and return |X[k]| for k = 0..n/2.
    The mirrored upper half of the spectrum is never computed.
    """
    frame = np.asarray(frame, dtype=np.float64)
    spectrum = np.fft.rfft(frame * hann_window_coefficients(len(frame)))
    return np.abs(spectrum)


def aggregate_bins_to_bars_log(sample_rate, fft_size, magnitudes, bars):
    """
    Collapse linear FFT bins into `bars` log-frequency buckets.

    Each bin above DC is placed on a log(f + 1) axis spanning one bin-width
    to Nyquist; a bar keeps the largest magnitude of the bins that land in it
    so narrow peaks stay visible at high frequencies.
    """
    magnitudes = np.asarray(magnitudes, dtype=np.float64)
    result = np.zeros(bars, dtype=np.float64)
    if magnitudes.size < 2 or bars == 0:
        return result

    f_min = sample_rate / fft_size
    f_max = sample_rate * 0.5
    log_f_min = math.log(f_min + 1.0)
    log_span = math.log(f_max + 1.0) - log_f_min

    freqs = np.arange(1, magnitudes.size) * sample_rate / fft_size
    if log_span > 0:
        t = np.clip((np.log(freqs + 1.0) - log_f_min) / log_span, 0.0, 1.0)
    else:
        # fft_size == 2: a single bin sits at both ends of the axis
        t = np.zeros_like(freqs)
    bar_ix = np.minimum((t * bars).astype(np.int64), bars - 1)

    np.maximum.at(result, bar_ix, magnitudes[1:])
    return result


def compress_amplitude(values):
    """log(1 + x): lifts quiet detail without flattening loud transients."""
    return np.log1p(np.asarray(values, dtype=np.float64))


def hop_size(fft_size, overlap):
    return max(1, int(round(fft_size * (1.0 - overlap))))


def frame_count(num_samples, fft_size, overlap):
    """
    Number of analysis frames for a signal.

    A signal shorter than one window still yields a single frame, which
    `compute_spectrum_frame` returns as all zeros.
    """
    hop = hop_size(fft_size, overlap)
    return (max(0, num_samples - fft_size) + hop) // hop


def compute_spectrum_frame(samples, sample_rate, frame_index, fft_size, overlap, bars):
    """
    Per-frame bar values: window -> FFT -> log-frequency bars -> log(1 + x).
    Returns `bars` zeros when the window would run past the end of `samples`.
    """
    start = frame_index * hop_size(fft_size, overlap)
    if start + fft_size > len(samples):
        return np.zeros(bars, dtype=np.float32)

    magnitudes = compute_magnitudes(samples[start : start + fft_size])
    raw = aggregate_bins_to_bars_log(sample_rate, fft_size, magnitudes, bars)
    return compress_amplitude(raw).astype(np.float32)


def _frame_max(bar_values):
    return float(bar_values.max()) if bar_values.size else 0.0


def compute_all_spectrums(samples, sample_rate, fft_size, overlap, bars):
    """
    Compute bar values for every analysis frame of `samples`.

    Returns (frame_spectrums, global_max). Frames are computed independently
    and their maxima folded afterwards; normalisation is left to the caller.
    """
    samples = np.asarray(samples, dtype=np.float32)
    num_frames = frame_count(len(samples), fft_size, overlap)

    frame_spectrums = [
        compute_spectrum_frame(samples, sample_rate, i, fft_size, overlap, bars)
        for i in range(num_frames)
    ]
    global_max = functools.reduce(max, map(_frame_max, frame_spectrums), 0.0)

    logger.debug(f"Computed {num_frames} spectrum frames, global max {global_max:.4f}")
    return frame_spectrums, global_max


def total_video_frames(num_samples, sample_rate, fps):
    """Number of output video frames needed to cover the signal (at least 1)."""
    if sample_rate <= 0:
        return 1
    return max(1, math.ceil(num_samples / sample_rate * fps))


def spectrum_index_for_frame(frame_index, total_frames, num_spectrum_frames):
    """Map an output video frame onto the analysis frame covering the same time."""
    if num_spectrum_frames == 0:
        return 0
    index = frame_index * num_spectrum_frames // max(total_frames, 1)
    return min(index, num_spectrum_frames - 1)


def normalize_bar_heights(bar_values, global_max):
    """Scale bar values by the global maximum into [0, 1]. Silence divides by 1."""
    norm = global_max if global_max > 0 else 1.0
    return np.clip(np.asarray(bar_values, dtype=np.float32) / norm, 0.0, 1.0)


class AudioAnalyser:
    """
    Handles loading audio and extracting per-frame bar values for visualisation.
    """

    def __init__(self, filepath, fft_size=N_FFT, overlap=OVERLAP, bars=N_BARS):
        logger.info(f"[+] Loading audio: {filepath}...")
        try:
            self.y, self.sr = decode_audio(filepath)
        except Exception as e:
            sys.exit(f"[!] Error loading audio file: {e}")

        self._analyse(fft_size, overlap, bars)

    @classmethod
    def from_samples(cls, samples, sample_rate, fft_size=N_FFT, overlap=OVERLAP, bars=N_BARS):
        """Build an analyser over an already decoded mono buffer."""
        analyser = cls.__new__(cls)
        analyser.y = np.asarray(samples, dtype=np.float32)
        analyser.sr = int(sample_rate)
        analyser._analyse(fft_size, overlap, bars)
        return analyser

    def _analyse(self, fft_size, overlap, bars):
        self.fft_size = fft_size
        self.overlap = overlap
        self.bars = bars
        self.duration = librosa.get_duration(y=self.y, sr=self.sr)
        logger.info(f"[+] Decoded {len(self.y)} samples at {self.sr} Hz")

        # Pre-calculate features
        logger.info("[+] Computing spectrum...")
        self.frame_spectrums, self.global_max = compute_all_spectrums(
            self.y, self.sr, fft_size, overlap, bars
        )

    def total_video_frames(self, fps):
        return total_video_frames(len(self.y), self.sr, fps)

    def get_bars_for_frame(self, frame_index, total_frames):
        """
        Returns normalised bar heights (0.0 to 1.0) for output video frame
        `frame_index` out of `total_frames`.
        """
        if not self.frame_spectrums:
            return np.zeros(self.bars, dtype=np.float32)

        spectrum_index = spectrum_index_for_frame(
            frame_index, total_frames, len(self.frame_spectrums)
        )
        return normalize_bar_heights(self.frame_spectrums[spectrum_index], self.global_max)
