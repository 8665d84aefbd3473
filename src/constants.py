# Color quantization bucket width (per channel)
QUANT_STEP = 16

# Quantized colors at or below / at or above these on all channels are
# treated as near-black / near-white when picking the dominant color
BLACK_THRESHOLD = 16
WHITE_THRESHOLD = 240

# Frames are shrunk to 1/DOWNSCALE_FACTOR of their width and height
DOWNSCALE_FACTOR = 10

# Number of colors written to the statistics log per cycle
TOP_COLORS_COUNT = 10

# Home Assistant brightness (0-255) sent with every color update
LED_BRIGHTNESS = 255

# Sync loop defaults
DEFAULT_UPDATE_INTERVAL_MS = 100
DEFAULT_COLOR_CHANGE_THRESHOLD = 32.0
DEFAULT_LED_ENTITY = "light.ldvsmart_indflex2m"
DEFAULT_HA_URL = "http://localhost:8123"

# Output files
COLOR_LOG_FILE = "colorlog.json"
SCREENSHOT_FILE = "screenshot.png"
