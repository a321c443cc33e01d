from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    # "redis" or "sqlite"
    backend: str = os.getenv("TERMGRAPH_BACKEND", "redis")

    # Redis
    redis_host: str = os.getenv("TERMGRAPH_REDIS_HOST", "localhost")
    redis_port: int = int(os.getenv("TERMGRAPH_REDIS_PORT", "6379"))
    redis_db: int = int(os.getenv("TERMGRAPH_REDIS_DB", "0"))

    # SQLite (local-first alternative to Redis)
    sqlite_path: str = os.getenv("TERMGRAPH_SQLITE_PATH", "./data/termgraph.db")

    # Key layout
    ns_prefix: str = os.getenv("TERMGRAPH_NS_PREFIX", "")
    separator: str = os.getenv("TERMGRAPH_SEPARATOR", ":")

    search_limit: int = int(os.getenv("TERMGRAPH_SEARCH_LIMIT", "100"))
