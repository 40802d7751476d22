# config.py
"""
Application configuration constants for Collage Grid
"""

# Layout defaults
DEFAULT_COLUMNS = 0  # 0 selects the automatic column table
DEFAULT_SPACING = 12
DEFAULT_CORNER_RADIUS = 12
DEFAULT_BORDER_WIDTH = 1
DEFAULT_EXPORT_SCALE = 2

# Export sizing
PNG_BASE_CELL_SIZE = 512
JPEG_BASE_CELL_SIZE = 640  # larger cells compensate for compression loss
MIN_EXPORT_WIDTH = 400
MIN_EXPORT_HEIGHT = 300
EXPORT_SCALES = [1, 2, 4]

# Colours (RGBA)
DEFAULT_CANVAS_BACKGROUND = (236, 236, 236, 255)
DEFAULT_ITEM_BACKGROUND = (255, 255, 255, 255)
DEFAULT_BORDER_COLOR = (0, 0, 0, 51)  # primary colour at 20% opacity

# Encoding
JPEG_QUALITY_HIGH = 90
JPEG_QUALITY_MEDIUM = 70
QUALITY_MIN = 1
QUALITY_MAX = 100
DEFAULT_PNG_NAME = "collage.png"
DEFAULT_JPEG_NAME = "collage.jpg"

# Supported image formats
SUPPORTED_IMAGE_FORMATS = ['png', 'jpg', 'jpeg', 'bmp', 'webp', 'gif', 'tiff']
EXPORT_FORMATS = ['png', 'jpg', 'jpeg']

# Ingestion
MAX_IMAGE_DIMENSION = 10000       # Reject decoded images larger than this
INGEST_WORKERS = 4
URL_TIMEOUT_SECS = 15

# Logging
LOGGER_NAME = "collage_grid"
LOG_FILE_NAME = "collage_grid.log"
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 5
LOG_LEVEL_ENV = "COLLAGE_LOG_LEVEL"
