# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "FOCUS_APP_NAME": "App display name (default: todays-focus).",
    "FOCUS_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "FOCUS_DATA_DIR": "Local data directory (default: .local/focus).",
    "FOCUS_DB_PATH": "Key/value SQLite path (default: <data_dir>/focus.sqlite3).",
    "FOCUS_STORAGE_KEY": "Key holding the serialized task list (default: todos).",
    # Reminders
    "FOCUS_NAG_DELAY_MINUTES": "Delay of the nagging follow-up after a reminder (default: 10).",
    "FOCUS_NOTIFY_INTERVAL_SECONDS": "How often due reminders are checked (default: 5).",
    # Display defaults
    "FOCUS_FIRST_WEEKDAY": "First day of the week for 'this week': 0-6 or a name (default: monday).",
    "FOCUS_SHOW_COMPLETED": "Show completed tasks in /list (true/false).",
    "FOCUS_DEFAULT_CATEGORY": "Category for new tasks (Yours, Work, Groceries, Learning, MeetUps, Family).",
    "FOCUS_DEFAULT_PRIORITY": "Priority for new tasks (Low, Medium, High).",
    # Connectors
    "FOCUS_CONSOLE_ENABLED": "Run the console REPL (true/false). Off = deliver reminders only.",
}
