# Configuration file for the Grid Rhythm visualizer
# All configurable parameters are centralized here for easy modification

# =============================================================================
# DISPLAY SETTINGS
# =============================================================================
WINDOW_WIDTH = 960
WINDOW_HEIGHT = 640
WINDOW_TITLE = "Grythm - Grid Rhythm Visualizer"
FPS = 60
BACKGROUND_COLOR = (13, 13, 16)  # Near black

# =============================================================================
# TIMING SETTINGS
# =============================================================================
MAX_TIME_STEP = 0.05  # Longest interactive frame step (seconds); longer frames are clamped

# =============================================================================
# GRID SETTINGS
# =============================================================================
# Each entry is one family of infinite parallel lines. normal points across the
# lines, spacing is the distance between them, thickness is the half-width of the
# touch band. dash_length or gap_length of 0 draws a solid line.
GRID_FAMILIES = [
    {
        "name": "vertical",
        "normal": (1.0, 0.0),
        "spacing": 60.0,
        "offset": 0.0,
        "thickness": 2.0,
        "dash_length": 60.0,
        "gap_length": 60.0,
        "color": (102, 102, 255),  # Blue
    },
    {
        "name": "horizontal",
        "normal": (0.0, 1.0),
        "spacing": 60.0,
        "offset": 0.0,
        "thickness": 2.0,
        "dash_length": 0.0,
        "gap_length": 0.0,
        "color": (102, 255, 102),  # Green
    },
]

# =============================================================================
# POINT SETTINGS
# =============================================================================
# Starting markers as fractions of the window size
DEFAULT_POINT_LAYOUT = [
    (0.25, 0.5),
    (0.5, 0.5),
    (0.75, 0.5),
    (0.5, 0.25),
    (0.5, 0.75),
]
HOVER_RADIUS = 10  # Cursor distance (pixels) for hovering/removing a point

# =============================================================================
# MOTION SETTINGS
# =============================================================================
DEFAULT_DIRECTION = (1.0, 0.3)  # Normalized at startup
DEFAULT_SPEED = 120.0  # pixels per second
ROTATION_RATE_DEGREES = 90.0  # degrees per second while a rotate key is held
ACCELERATION = 120.0  # pixels per second^2 while a speed key is held

# =============================================================================
# AUDIO SETTINGS
# =============================================================================
SAMPLE_RATE = 48000
AUDIO_CHANNELS = 2
AUDIO_BUFFER = 512
BLIP_SECONDS = 0.06
BLIP_FREQUENCY = 880.0  # Hz
BLIP_AMPLITUDE = 0.25  # Fraction of full scale, keeps overlapping blips from clipping
BLIP_DECAY = 6.0  # Exponential decay rate across the blip length
BLIP_VOLUME = 1.0

# =============================================================================
# RENDERING SETTINGS
# =============================================================================
# Grid lines are stroked round(thickness) px wide so the drawn line matches its touch band
MARKER_SIZE = 6
MARKER_HOVER_SIZE = 8
MARKER_WIDTH = 2
MARKER_COLOR = (255, 238, 170)
MARKER_HOVER_COLOR = (255, 255, 102)
FLASH_FRAMES = 8  # Frames a marker stays lit after a touch
FLASH_COLOR = (255, 120, 120)

# =============================================================================
# UI SETTINGS
# =============================================================================
UI_FONT_SIZE = 24
UI_TEXT_COLOR = (255, 255, 255)  # White
UI_SECONDARY_COLOR = (150, 150, 150)  # Medium gray
UI_MARGIN = 10
UI_LINE_HEIGHT = 20
CONTROLS_FROM_BOTTOM = 150
CONTROLS_LINE_HEIGHT = 20

# =============================================================================
# VIDEO SETTINGS
# =============================================================================
VIDEO_FPS = 60
VIDEO_SECONDS = 20.0
VIDEO_CODEC = "mp4v"
VIDEO_OUTPUT_DIR = "recordings"
VIDEO_TAIL_SECONDS = 0.25  # Audio kept after the last frame so the final blip is not cut

# =============================================================================
# CONTROL SETTINGS
# =============================================================================
# Key bindings (using pygame constants)
import pygame

KEY_EXIT = pygame.K_ESCAPE
KEY_ROTATE_LEFT = pygame.K_LEFT
KEY_ROTATE_RIGHT = pygame.K_RIGHT
KEY_SPEED_UP = pygame.K_UP
KEY_SPEED_DOWN = pygame.K_DOWN
KEY_RESET = pygame.K_r
KEY_MUTE = pygame.K_m
KEY_TOGGLE_UI = pygame.K_h  # 'H' for hide/show

# Control descriptions for UI
CONTROLS = [
    "Controls (H to hide):",
    "Click: add point / remove hovered point",
    "LEFT/RIGHT: Rotate direction",
    "UP/DOWN: Speed +/-",
    "M: Mute   R: Reset",
    "ESC: Exit",
]
