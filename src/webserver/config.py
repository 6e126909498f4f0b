"""
Configuration helpers for the timeline web server.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3001
    db_path: str = ":memory:"
    seed_dir: Optional[str] = None
    # Upper bound on header ticks per /api/timeline response (~208 days at 30 min)
    max_timeline_ticks: int = 10_000

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ServerConfig":
        """
        Builds a config from TIMELINE_* environment variables.

        Values from a .env file are loaded first without overriding variables
        already set in the environment.

        Args:
            env_file: Optional explicit path to a .env file.

        Returns:
            ServerConfig: Config with environment overrides applied.
        """
        load_dotenv(env_file)
        defaults = cls()
        return cls(
            host=os.getenv("TIMELINE_HOST", defaults.host),
            port=int(os.getenv("TIMELINE_PORT", defaults.port)),
            db_path=os.getenv("TIMELINE_DB_PATH", defaults.db_path),
            seed_dir=os.getenv("TIMELINE_SEED_DIR") or defaults.seed_dir,
            max_timeline_ticks=int(
                os.getenv("TIMELINE_MAX_TICKS", defaults.max_timeline_ticks)
            ),
        )
