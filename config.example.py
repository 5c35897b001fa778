# config.example.py

"""
Documentation-only module (safe to commit).

Task Tray reads its configuration from environment variables, optionally via a local .env file
in the working directory. Every path defaults to a location under TASKTRAY_DATA_DIR.
"""

ENV_VARS = {
    # App / logging
    "TASKTRAY_APP_NAME": "Display name used in dialogs and previews (default: Task Tray).",
    "TASKTRAY_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKTRAY_CONSOLE_LOG": "Log to stderr in addition to the log file (true/false, default: true).",
    # Paths
    "TASKTRAY_DATA_DIR": (
        "Data directory (default: <user config dir>/systray-queue-app, e.g. ~/.config/systray-queue-app)."
    ),
    "TASKTRAY_QUEUE_PATH": "Queue JSON file (default: <data_dir>/queue.json).",
    "TASKTRAY_ATTACHMENTS_DIR": "Managed attachment copies (default: <data_dir>/attachments).",
    "TASKTRAY_PREVIEWS_DIR": "Rendered HTML previews (default: <data_dir>/previews).",
    "TASKTRAY_LOG_DIR": "Log file directory (default: <data_dir>/logs).",
    # OS integration
    "TASKTRAY_AUTOSTART_NAME": "Name of the run-at-login entry (default: task-tray).",
}
