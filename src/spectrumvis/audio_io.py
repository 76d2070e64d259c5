import logging

import librosa
import numpy as np
import soundfile as sf

logger = logging.getLogger(__name__)


def decode_audio(filepath):
    """
    Decode an audio file to mono float32 PCM at its native sample rate.
    Multi-channel input is averaged down to a single channel.
    """
    samples, sample_rate = librosa.load(filepath, sr=None, mono=True)
    logger.debug(f"Decoded {len(samples)} samples at {sample_rate} Hz")
    return samples.astype(np.float32, copy=False), int(sample_rate)


def write_wav(path, samples, sample_rate):
    """Write mono samples in [-1, 1] to a 16-bit PCM WAV file."""
    data = np.clip(np.asarray(samples, dtype=np.float32), -1.0, 1.0)
    sf.write(path, data, sample_rate, subtype="PCM_16")
    logger.debug(f"Wrote {len(data)} samples to {path}")
