"""
Fixed run constants for the site mirror.

A run started without arguments uses exactly these values.
"""

# Site being mirrored; discovered links are resolved against this URL
DEFAULT_BASE_URL = "https://google.com"

# Section of the site that is followed during traversal
DEFAULT_SCOPE_PREFIX = "/en"

# Path of the first page visited (seed URL = base URL + seed path)
DEFAULT_SEED_PATH = "/en"

# Root directory for rendered pages and their assets
DEFAULT_OUTPUT_DIR = "./site"

# Pause after navigation before the markup is captured, in seconds
DEFAULT_SETTLE_DELAY = 2.0

# Page render timeout in milliseconds (for Playwright)
DEFAULT_RENDER_TIMEOUT = 60000

# Navigation event Playwright waits for before the settle pause
DEFAULT_WAIT_UNTIL = "networkidle"

# Default user agent string for all HTTP requests
# Used by both the browser renderer and the resource fetcher
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Asset request timeout in seconds
DEFAULT_ASSET_TIMEOUT = 30

# Maximum assets of one page fetched at the same time
DEFAULT_CONCURRENCY = 10

# Name of the file a rendered page is saved as inside its folder
PAGE_FILENAME = "index.html"
