"""
Configuration for DLT AI - v1.0
Super Lotto 5+2 multi-strategy number generator
"""
import os
import logging
from pathlib import Path
from math import comb

# ============================================================================
# ENVIRONMENT DETECTION
# ============================================================================
IS_STREAMLIT_CLOUD = os.getenv("STREAMLIT_SHARING_MODE") is not None or \
                     os.getenv("STREAMLIT_RUNTIME_ENVIRONMENT") == "cloud"
IS_CLOUD = IS_STREAMLIT_CLOUD or os.getenv("CLOUD_ENV", "0") == "1"

# ============================================================================
# PATHS
# ============================================================================
BASE_DIR = Path(__file__).parent.parent

if os.getenv("DLT_DATA_DIR"):
    DATA_DIR = Path(os.getenv("DLT_DATA_DIR"))
elif IS_STREAMLIT_CLOUD:
    DATA_DIR = Path("/tmp/dlt_ai")
else:
    DATA_DIR = BASE_DIR / "data"

DATA_DIR.mkdir(parents=True, exist_ok=True)
DB_PATH = DATA_DIR / "dlt_history.db"
DB_URL = os.getenv("DLT_DB_URL", f"sqlite:///{DB_PATH}")

# ============================================================================
# GAME CONFIGURATION - SUPER LOTTO 5/35 + 2/12
# ============================================================================
FRONT_MIN = 1
FRONT_MAX = 35
FRONT_PICK = 5
FRONT_RANGE = (FRONT_MIN, FRONT_MAX)

BACK_MIN = 1
BACK_MAX = 12
BACK_PICK = 2
BACK_RANGE = (BACK_MIN, BACK_MAX)

GAME_NAME = "Super Lotto 5+2"
DRAW_DAYS = [0, 2, 5]  # Monday, Wednesday, Saturday

TOTAL_COMBINATIONS = comb(FRONT_MAX, FRONT_PICK) * comb(BACK_MAX, BACK_PICK)  # 21,425,712

# ============================================================================
# GENERATION ENGINE
# ============================================================================
TOTAL_GROUPS = 13
RECENT_WINDOW = 10

MARKOV_MIN_HISTORY = 2
BAYES_MIN_HISTORY = 1
NEURAL_MIN_HISTORY = 10
TIME_SERIES_MIN_HISTORY = 10

NEURAL_INPUT_DRAWS = 10
NEURAL_HIDDEN_FRONT = 20
NEURAL_HIDDEN_BACK = 8
NEURAL_WEIGHT_MEAN = 0.1
NEURAL_WEIGHT_STD = 0.5

TIME_SERIES_RECENT = 10
TIME_SERIES_WEIGHT_FLOOR = 0.1

# ============================================================================
# PRIZE TABLE (score points, not currency)
# ============================================================================
# (front matches, back matches) -> prize level; 1 is the top tier
PRIZE_LEVELS = {
    (5, 2): 1,
    (5, 1): 2,
    (5, 0): 3,
    (4, 2): 4,
    (4, 1): 5,
    (3, 2): 6,
    (4, 0): 7,
    (3, 1): 8,
    (2, 2): 8,
    (3, 0): 9,
    (1, 2): 9,
    (2, 1): 9,
    (0, 2): 9,
}

SCORE_CHANGES = {
    1: 9_999_998,
    2: 99_998,
    3: 9_998,
    4: 2_998,
    5: 298,
    6: 198,
    7: 98,
    8: 13,
    9: 3,
}
MISS_PENALTY = -2

MAX_GENERATION_RECORDS = 20

# ============================================================================
# LOGGING
# ============================================================================
LOG_LEVEL = logging.DEBUG if not IS_CLOUD else logging.INFO
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.basicConfig(
    level=LOG_LEVEL,
    format=LOG_FORMAT,
    handlers=[logging.StreamHandler()]
)

logger = logging.getLogger("dlt_ai.config")

logger.info(f"Environment: Cloud={IS_CLOUD}, Streamlit={IS_STREAMLIT_CLOUD}")
logger.info(f"Data directory: {DATA_DIR}")
logger.info(f"Database: {DB_URL}")
logger.info(f"Front range: {FRONT_RANGE} pick {FRONT_PICK}, "
            f"back range: {BACK_RANGE} pick {BACK_PICK}")
logger.info(f"Total combinations: {TOTAL_COMBINATIONS:,}")
