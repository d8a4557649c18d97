# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use .env (local, gitignored) for machine-specific values.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKMATE_APP_NAME": "App display name (default: taskmate).",
    "TASKMATE_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # REST API
    "TASKMATE_HOST": "Bind address of `taskmate serve` (default: 127.0.0.1).",
    "TASKMATE_PORT": "Port of `taskmate serve` (default: 5000).",
    "TASKMATE_DEBUG": "Flask debug mode (true/false, default: false).",
    "TASKMATE_CORS_ORIGIN": "Access-Control-Allow-Origin value (default: *).",
    # Client
    "TASKMATE_API_BASE_URL": "Base URL the console board talks to (default: http://<host>:<port>/api).",
    "TASKMATE_REQUEST_TIMEOUT_SECONDS": "Per-request timeout of the HTTP client (default: 10).",
    "TASKMATE_TIMEZONE": (
        "IANA zone used for 'today', day columns and hour rows (default: host local zone)."
    ),
    # Paths (gitignored)
    "TASKMATE_DATA_DIR": "Local data directory, also holds taskmate.log (default: .local/taskmate).",
    "TASKMATE_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
}
