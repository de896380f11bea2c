"""
Constants for tko-subs
"""

VERSION = "1.0.0"

# Per-domain deadline covering DNS resolution and the HTTP probe
SCAN_TIMEOUT = 5.0

# HTTP probe timeouts
CONNECT_TIMEOUT = 5.0
TLS_HANDSHAKE_TIMEOUT = 5.0
REQUEST_TIMEOUT = 5.0

READ_CHUNK_SIZE = 8192

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

# Outcome messages, one per evaluated domain
MSG_NOT_FOUND = "{domain} Not found as dangling for any of the common content hosting websites"
MSG_TIMEOUT = "timedout"
MSG_UNREACHABLE = "Can't reach the domain {domain}"
MSG_READ_ERROR = "Trouble reading response from {domain}"
MSG_TAKEN_OVER = "Please check {domain} after a few minutes to ensure that it has been taken over.."
MSG_TAKEOVER_FAILED = "Takeover of {domain} via {provider} failed: {reason}"
MSG_UNSUPPORTED = (
    "This can potentially be taken over. Unfortunately, the tool does not support "
    "taking over {provider} websites at the moment."
)

# GitHub Pages takeover
GITHUB_API = "https://api.github.com"
GITHUB_PAGES_BRANCH = "gh-pages"
GITHUB_REPO_DESCRIPTION = "testing subdomain takeovers"
GITHUB_LICENSE_TEMPLATE = "mit"
PLACEHOLDER_PAGE = "This domain is temporarily suspended"

# Heroku custom domain takeover
HEROKU_API = "https://api.heroku.com"
HEROKU_ACCEPT = "application/vnd.heroku+json; version=3"

# Environment variables holding takeover secrets, first match wins
ENV_KEYS = {
    "github_token": ["token", "GITHUB_TOKEN"],
    "heroku_username": ["herokuusername", "HEROKU_USERNAME"],
    "heroku_api_key": ["herokuapikey", "HEROKU_API_KEY"],
    "heroku_app_name": ["herokuappname", "HEROKU_APP_NAME"],
}
