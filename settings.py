# settings.py

# Configuration constants for the page replacement visualizer.
# Adjust these to change the defaults and limits of the sidebar widgets.

# WORKLOAD #
DEFAULT_REFERENCE_STRING = "7,0,1,2,0,3,0,4,2,3,0,3,2,1,2,0,1,7,0,1"

# FRAMES #
DEFAULT_FRAME_COUNT = 3
MIN_FRAME_COUNT = 1
MAX_FRAME_COUNT = 10  # UI clamp only, the engine accepts any capacity >= 1

# PLAYBACK #
DEFAULT_SPEED = 1.0
MIN_SPEED = 0.5
MAX_SPEED = 3.0
SPEED_STEP = 0.5
BASE_TICK_SECONDS = 1.0  # tick period at speed 1.0

# EVENT LOG #
MAX_EVENT_LOG = 200
EVENT_LOG_DISPLAY = 20
