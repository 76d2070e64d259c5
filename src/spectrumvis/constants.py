# --- Configuration Constants ---
DEFAULT_FPS = 30
DEFAULT_RESOLUTION = (1920, 1080)
N_FFT = 2048
OVERLAP = 0.5  # 0.5 = 50% overlap between analysis frames
N_BARS = 128  # Number of frequency bars

# Spectrum band settings
SPECTRUM_HEIGHT = 200  # pixels
SPECTRUM_Y_FROM_BOTTOM = 0  # distance from frame bottom to band bottom edge
BAND_MARGIN = 4  # pixels reserved at the band's top/bottom edges

# Bar settings
BAR_GAP = 1  # pixels between bars
MIN_CORNER_RADIUS = 1
MAX_CORNER_RADIUS = 4

# Colors (RGBA)
BAR_COLOR = (0, 0, 0, 255)  # Black
BG_COLOR = (255, 255, 255, 255)  # White
