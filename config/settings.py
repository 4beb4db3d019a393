import os

# Project root directory (stocksight/)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Local state: key-value store file, logs and exported reports
DATA_DIR = os.getenv("STOCKSIGHT_DATA_DIR", os.path.join(BASE_DIR, "data"))
LOGS_DIR = os.path.join(BASE_DIR, "logs")
REPORTS_DIR = os.path.join(BASE_DIR, "reports")
STORE_FILE = os.path.join(DATA_DIR, "local_store.json")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Simulated network latency (seconds) for the mock services
FETCH_LATENCY_SECONDS = float(os.getenv("STOCKSIGHT_FETCH_LATENCY", "1.0"))
SAVE_LATENCY_SECONDS = float(os.getenv("STOCKSIGHT_SAVE_LATENCY", "0.5"))
ANALYSIS_LATENCY_SECONDS = float(os.getenv("STOCKSIGHT_ANALYSIS_LATENCY", "2.0"))

# Dashboard limits
PROMPT_HISTORY_LIMIT = 5
MAX_SYMBOLS_PER_REQUEST = int(os.getenv("STOCKSIGHT_MAX_SYMBOLS", "50"))

# Ensure required local directories exist
for _path in (DATA_DIR, LOGS_DIR, REPORTS_DIR):
    os.makedirs(_path, exist_ok=True)
