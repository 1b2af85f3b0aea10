import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Directory Configuration
# Use absolute path relative to project root
BASE_DIR = os.getenv(
    "ORGANIZER_DATA_DIR",
    os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "organizer_data"))
)
REPORT_DIR = os.path.join(BASE_DIR, "reports")
LOG_DIR = os.path.join(BASE_DIR, "logs")
DATABASE_URL = os.getenv("ORGANIZER_DATABASE_URL", f"sqlite:///{os.path.join(BASE_DIR, 'organizer.db')}")

# K-Means Settings
KMEANS_MAX_ITERATIONS = 100
DEFAULT_MAX_CLUSTERS = 8
MIN_CLUSTER_SIZE = 3
MIN_FILES_FOR_ORGANIZATION = 10
KMEANS_MEMBER_CONFIDENCE = 0.8
FOLDER_MEMBER_CONFIDENCE = 0.9
MOVE_CONFIDENCE_THRESHOLD = 0.7

# Cluster Categories (order matters: first highest score wins)
CATEGORIES = ["work", "personal", "media", "documents", "archive", "mixed"]
FALLBACK_CATEGORY = "mixed"

# Keyword patterns for Theme Categorization
CATEGORY_PATTERNS = {
    "work": ["meeting", "report", "presentation", "budget", "project", "proposal", "work", "business", "company"],
    "personal": ["photo", "vacation", "family", "personal", "diary", "journal", "home", "life"],
    "media": ["image", "video", "audio", "photo", ".jpg", ".png", ".mp4", "media", "picture"],
    "documents": ["document", "pdf", "doc", "text", "notes", "manual", "paper", "report"],
    "archive": ["old", "backup", "archive", "2020", "2021", "2022", "previous"],
}

# Lexical analysis
CONTENT_SAMPLE_CHARS = 200
MIN_TOKEN_LENGTH = 3          # tokens must be strictly longer than this
COMMON_WORD_RATIO = 0.3
MIN_COMMON_WORD_COUNT = 2
MAX_COMMON_WORDS = 3
NAME_STOPWORDS = {"file", "document", "untitled", "doc", "pdf", "txt"}

CLUSTER_COLORS = [
    "#3B82F6", "#EF4444", "#10B981", "#F59E0B",
    "#8B5CF6", "#06B6D4", "#F97316", "#84CC16",
]

# Cleanup Thresholds (bytes)
EMPTY_FILE_THRESHOLD = 50
TINY_FILE_THRESHOLD = 2048
SMALL_FILE_THRESHOLD = 10240
LARGE_FILE_THRESHOLD = 100 * 1024 * 1024
OLD_FILE_MONTHS = 12
OLD_CLEANUP_YEARS = 2
MAX_SCAN_FILES = 1000
MAX_CONTENT_LENGTH = 2000
MAX_ANALYZABLE_SIZE = 1024 * 1024
DUPLICATE_SIMILARITY_THRESHOLD = 0.85
HIGH_SIMILARITY_THRESHOLD = 0.95
MIN_DUPLICATE_CONTENT_LENGTH = 100

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
DUPLICATE_NAME_MARKERS = [" - Copy", " (1)", "_copy"]
SYSTEM_FILE_NAMES = [".DS_Store"]
SYSTEM_FILE_PREFIXES = ["._"]
CACHE_NAME_MARKERS = ["thumb", "cache"]

ANALYZABLE_MIME_TYPES = [
    "application/vnd.google-apps.document",
    "application/vnd.google-apps.spreadsheet",
    "application/vnd.google-apps.presentation",
    "text/plain",
    "application/pdf",
]

# LLM Settings
LLM_PROVIDER = os.getenv("ORGANIZER_LLM_PROVIDER", "google")
LLM_MODEL = os.getenv("ORGANIZER_LLM_MODEL", "gemini-2.5-flash")

# OAuth state tokens
STATE_TOKEN_TTL_SECONDS = 600


def setup_directories():
    """Creates the necessary folder structure."""
    for directory in [BASE_DIR, REPORT_DIR, LOG_DIR]:
        os.makedirs(directory, exist_ok=True)

    logging.info(f"✅ Directories Ready under: {BASE_DIR}")


def setup_logging():
    """Configures system logging."""
    log_file = os.path.join(LOG_DIR, "organizer_log.txt")

    logging.basicConfig(
        filename=log_file,
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        force=True
    )
    # Add console handler
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    logging.getLogger('').addHandler(console)
    logging.info("✅ Logger Initialized.")
