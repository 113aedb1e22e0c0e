# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name shown in the board header (default: TaskFlow).",
    "TASKFLOW_LOG_LEVEL": "Log file level (default: INFO). The console only shows warnings.",
    # Paths (gitignored)
    "TASKFLOW_DATA_DIR": "Local data directory, also holds taskflow.log (default: .local/taskflow).",
    "TASKFLOW_STORAGE_PATH": (
        "Local storage JSON file (default: <data_dir>/local_storage.json)."
    ),
    # Persistence
    "TASKFLOW_PERSIST": "Keep tasks between sessions (true/false, default: true).",
    "TASKFLOW_STORAGE_KEY": "Key the task snapshot is stored under (default: tasks).",
    "TASKFLOW_STORAGE_QUOTA_BYTES": "Local storage size limit in bytes (default: 5 MiB, 0 = unlimited).",
}
