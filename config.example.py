# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use a local, gitignored .env for machine-specific values.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKCAL_APP_NAME": "App display name (default: task-calendar).",
    "TASKCAL_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKCAL_DATA_DIR": "Local data directory, also holds task_calendar.log (default: .local/task_calendar).",
    "TASKCAL_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    # Calendar
    "TASKCAL_TODAY": "Pin 'today' to an ISO date (YYYY-MM-DD); default is the local date at start-up.",
    "TASKCAL_START_LOCKED": "Start with calendar scrolling locked (true/false, default: true).",
}
