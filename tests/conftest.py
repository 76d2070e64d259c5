"""
Shared pytest fixtures for spectrum-vis tests.
"""
import numpy as np
import pytest

SAMPLE_RATE = 44100


def make_sine(num_samples, freq=1000.0, sample_rate=SAMPLE_RATE, amplitude=0.8):
    t = np.arange(num_samples, dtype=np.float64) / sample_rate
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


@pytest.fixture
def sample_rate():
    return SAMPLE_RATE


@pytest.fixture
def sine_4096():
    """4096 samples of a 1 kHz sine at 44.1 kHz."""
    return make_sine(4096)


@pytest.fixture
def sine_8192():
    """8192 samples of a 440 Hz + 3 kHz two-tone mix at 44.1 kHz."""
    return make_sine(8192, 440.0, amplitude=0.5) + make_sine(8192, 3000.0, amplitude=0.3)
