# File: vivatrain_app/client/config.py

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class ClientConfig:
    """Settings for the client controllers and their API client."""

    base_url: str = 'http://localhost:5000'
    timeout: float = 10.0
    # Pause between a success alert and the navigation that follows it
    redirect_delay: float = 1.5

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            base_url=os.environ.get('VIVATRAIN_BASE_URL', cls.base_url),
            timeout=float(os.environ.get('VIVATRAIN_TIMEOUT', cls.timeout)),
            redirect_delay=float(os.environ.get('VIVATRAIN_REDIRECT_DELAY', cls.redirect_delay)),
        )
