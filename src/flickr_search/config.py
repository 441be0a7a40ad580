"""Project-wide configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(os.environ.get("FLICKR_SEARCH_PROJECT_ROOT", Path.cwd()))

load_dotenv(PROJECT_ROOT / ".env")

# Flickr API
FLICKR_API_KEY = os.environ.get("FLICKR_API_KEY", "")
FLICKR_API_BASE = "https://api.flickr.com/services/rest/"
FLICKR_SEARCH_METHOD = "flickr.photos.search"
FLICKR_PER_PAGE = 30

# Static photo URLs – size suffix: m=240 (thumbnail), b=1024 (large)
FLICKR_STATIC_URL_TEMPLATE = (
    "http://farm{farm}.staticflickr.com/{server}/{photo_id}_{secret}_{size}.jpg"
)

HTTP_TIMEOUT = float(os.environ.get("FLICKR_SEARCH_HTTP_TIMEOUT", "30"))

# Favourites store
FAVOURITES_DB_PATH = PROJECT_ROOT / "flickr_search_favourites.duckdb"

LOG_LEVEL = os.environ.get("FLICKR_SEARCH_LOG_LEVEL", "INFO")
