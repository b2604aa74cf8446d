"""
Configuration constants for the Wikipedia Random Fact widget.

All endpoints, limits, and tunable parameters are defined here.
Overrides are read from environment variables (optionally via a .env file
loaded by the entry points).
"""

import os

# =============================================================================
# Wikipedia API Configuration
# =============================================================================

# Base URL for article links
WIKIPEDIA_BASE_URL = "https://en.wikipedia.org/wiki/"

# Query API endpoint
WIKIPEDIA_API_URL = os.environ.get("WIKIFACT_API_URL", "https://en.wikipedia.org/w/api.php")

# Request timeout in seconds (the only timeout the pipeline enforces)
WIKIPEDIA_TIMEOUT = float(os.environ.get("WIKIFACT_TIMEOUT", "10"))

# User agent for requests (be a good citizen)
USER_AGENT = "WikiFact/0.1 (random fact widget; python httpx)"

# Fallbacks when a page entry lacks a title or extract
UNKNOWN_TITLE = "Unknown Title"
MISSING_EXTRACT = "No description available."

# =============================================================================
# Category Sampling Configuration
# =============================================================================

# Members requested per category listing call (API maximum for anonymous use)
CATEGORY_PAGE_SIZE = 500

# Upper bound on collected member ids per resolution.
# Bounds a huge category to ~20 listing requests; categories above the cap
# are sampled uniformly over the first MEMBER_POOL_CAP members only.
MEMBER_POOL_CAP = int(os.environ.get("WIKIFACT_MEMBER_POOL_CAP", "10000"))

# Results returned by the category search box
CATEGORY_SEARCH_LIMIT = 8

# =============================================================================
# Entropy Mode Configuration
# =============================================================================

# Length of the gesture collection window (milliseconds)
ENTROPY_WINDOW_MS = 5000

# Progress indicator refresh interval (milliseconds)
ENTROPY_TICK_MS = 100

# Random articles fetched per entropy resolution
ENTROPY_BATCH_SIZE = 10

# =============================================================================
# Web UI Configuration
# =============================================================================

# Flask session signing key
SECRET_KEY = os.environ.get("WIKIFACT_SECRET_KEY", "wikifact-dev-key-change-in-production")

# =============================================================================
# Logging Configuration
# =============================================================================

# Log level (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
