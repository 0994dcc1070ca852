# config.example.py

"""
Documentation-only module (safe to commit).

dispatch_queue reads its settings from environment variables, optionally
from a local .env file in the working directory. Every variable is
optional. This file exists to make the repo self-documenting.
"""

ENV_VARS = {
    # Logging (used by dispatch_queue.logging_setup.setup_logging)
    "DISPATCH_LOG_LEVEL": "Console logging level (default: INFO).",
    "DISPATCH_LOG_DIR": "Directory for dispatch.log (default: unset, no file log).",
    # Tasks
    "DISPATCH_TASK_CAPACITY": "Max values a task callable may capture (default: 8).",
    # Worker thread
    "DISPATCH_WORKER_NAME": "Default DispatchThread worker name (default: dispatch-worker).",
    "DISPATCH_WORKER_DAEMON": "Run workers as daemon threads (true/false, default: true).",
    # Event-loop pump
    "DISPATCH_PUMP_INTERVAL_SECONDS": "pump_queue() polling interval (default: 0.05).",
}
