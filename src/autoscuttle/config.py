# src/autoscuttle/config.py

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(PROJECT_DIR / ".env")

# Retry policy. Fixed by design, not read from the environment.
MAX_ATTEMPTS = 10
SETTLE_SECONDS = 90.0
RETRY_DELAY_SECONDS = 5.0
PRESS_DURATION_SECONDS = 0.1
SCUTTLE_KEY = "left"

# Outbound event names
EVENT_MAX_ATTEMPTS = "scuttle-max-attempts"
EVENT_SUCCESS = "scuttle-success"


class Config:
    # Application Configuration
    TITLE = "AUTOSCUTTLE"
    HOST = "127.0.0.1"
    PORT = 8000
    DEBUG = False

    # Status observer (empty means no observer; the clock fallback is used)
    OBSERVER_URL = ""
    OBSERVER_TIMEOUT = 5.0

    def __init__(self):
        self.reload()

    def reload(self):
        """Re-read overrides from the environment."""
        self.host = os.getenv("AUTOSCUTTLE_HOST", self.HOST)
        self.port = int(os.getenv("AUTOSCUTTLE_PORT", str(self.PORT)))
        self.debug = os.getenv("AUTOSCUTTLE_DEBUG", "").lower() in ("1", "true", "yes")
        self.observer_url = os.getenv("AUTOSCUTTLE_OBSERVER_URL", self.OBSERVER_URL)
        self.observer_timeout = float(
            os.getenv("AUTOSCUTTLE_OBSERVER_TIMEOUT", str(self.OBSERVER_TIMEOUT))
        )

    @property
    def server_url(self) -> str:
        """Base URL the CLI uses to reach the running server."""
        return os.getenv(
            "AUTOSCUTTLE_SERVER_URL", f"http://{self.host}:{self.port}"
        )


CONFIG = Config()
