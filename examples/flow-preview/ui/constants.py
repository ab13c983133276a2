"""Layout constants and color definitions."""

# Timing
FPS = 60

# Layout dimensions
SCREEN_W = 1280
SCREEN_H = 720
STATUS_H = 36

# Scene coordinates are centered; this is where (0, 0) lands on screen.
ORIGIN_X = SCREEN_W // 2 - 100
ORIGIN_Y = (SCREEN_H - STATUS_H) // 2 + 80

# Sizes at scale 1
OBJECT_RADIUS = 28
WALLET_SIZE = (180, 120)
SAFE_SIZE = (160, 160)

SEEK_STEP = 10

# Colors
BG_COLOR = (20, 20, 30)
STATUS_BG = (35, 35, 50)
TEXT_COLOR = (200, 200, 210)
TEXT_DIM = (120, 120, 140)
WALLET_COLOR = (90, 140, 220)
SAFE_COLOR = (150, 150, 170)
TOKEN_COLOR = (240, 200, 60)
BILL_COLOR = (80, 200, 110)

PHASE_COLORS: dict[str, tuple[int, int, int]] = {
    "accumulating": (60, 220, 80),
    "transferring": (255, 160, 40),
}
