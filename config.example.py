# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real tokens. Use .env (local, gitignored) or the token file under the data dir.

This file exists to make the repo self-documenting without a .env at hand.
"""

ENV_VARS = {
    # App / logging
    "TASKPAD_APP_NAME": "App display name (default: taskpad).",
    "TASKPAD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Backend
    "TASKPAD_BACKEND_URL": (
        "Backend base URL (default: https://pp5-productivity-backend2.onrender.com). "
        "REACT_APP_BACKEND_URL is accepted as a fallback."
    ),
    "TASKPAD_REQUEST_TIMEOUT_SECONDS": "Per-request timeout (default: 30, minimum 1).",
    "TASKPAD_CATEGORY_DEFAULTS_PATH": (
        "Public endpoint hit once to seed default categories when none exist (default: /api/categories/)."
    ),
    # Credentials
    "TASKPAD_ACCESS_TOKEN": "Bearer token for the authenticated channel (optional).",
    "TASKPAD_TOKEN_FILE": "File holding the bearer token when no token is set (default: <data_dir>/access_token).",
    # Form behaviour
    "TASKPAD_SUCCESS_DELAY_SECONDS": "Delay before closing the form after a successful submit (default: 1.5).",
    # Paths (gitignored)
    "TASKPAD_DATA_DIR": "Local data directory for logs and the token file (default: .local/taskpad).",
}
