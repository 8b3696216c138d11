# helpdesk/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Single connection string; the database name comes from its path
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/helpdesk")
DEFAULT_DATABASE = "helpdesk"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Pagination bounds for list/search endpoints
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
