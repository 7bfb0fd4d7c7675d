"""Voice Agent: configuration."""

import os

from dotenv import load_dotenv

from voice_agent import __version__

load_dotenv()

# ── Server ────────────────────────────────────────────────────────────────────
HOST = "0.0.0.0"
PORT = int(os.getenv("PORT", "3000"))

SERVICE_VERSION = __version__
WEBSITE = "aiworkflowadvisors.com"

# ── HTTP layer ────────────────────────────────────────────────────────────────
# Exact origins, or "*" standing for one or more subdomain labels.
ALLOWED_ORIGINS = [
    "https://aiworkflowadvisors.com",
    "https://*.aiworkflowadvisors.com",
    "https://*.netlify.app",
]
ALLOWED_METHODS = ["GET", "POST", "OPTIONS"]

MAX_BODY_BYTES = 10 * 1024 * 1024  # 10MB
GZIP_MINIMUM_SIZE = 1024

# ── Mock auth ─────────────────────────────────────────────────────────────────
TOKEN_TTL_MS = 3_600_000
SESSION_TOKEN_PREFIX = "demo-session-"
CSRF_TOKEN_PREFIX = "csrf-"
