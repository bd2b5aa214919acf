# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
The saved session file holds a bearer token: keep it out of version control.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Logging level (default: INFO).",
    # Backend
    "TASKBOARD_API_URL": "Todo API base URL (falls back to REACT_APP_API_URL, then http://localhost:8080).",
    "TASKBOARD_HTTP_TIMEOUT_SECONDS": "Per-request transport timeout (default: 15).",
    # Paths (gitignored)
    "TASKBOARD_DATA_DIR": "Local data directory (default: .local/taskboard).",
    "TASKBOARD_SESSION_FILE": "Persisted session path (default: <data_dir>/session.json).",
    # Tuning
    "TASKBOARD_REFRESH_INTERVAL_SECONDS": "Background board refresh period; 0 disables it (default: 0).",
}
