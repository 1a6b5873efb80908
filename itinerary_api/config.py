import os
from typing import Final, List

from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


class _Config:
    def __init__(self) -> None:
        # Security / limits
        self.api_key: str | None = os.getenv("PLANNER_API_KEY") or None
        self.rate_limit: str = os.getenv("PLANNER_RATE_LIMIT", "30/minute")
        self.cors_origins: List[str] = [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ]

        # Upstream generator
        self.gemini_api_key: str | None = os.getenv("GEMINI_API_KEY") or None
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")
        self.llm_temperature: float = _float_env("LLM_TEMPERATURE", 0.7)
        self.llm_timeout_sec: float = _float_env("LLM_TIMEOUT_SEC", 120.0)

        # Front-end pages
        self.static_dir: str | None = os.getenv("STATIC_DIR") or None
        self.index_page: str = os.getenv("INDEX_PAGE", "airbnb-map-demo.html")
        self.debug_page: str = os.getenv("DEBUG_PAGE", "debug-console.html")

        try:
            self.port: int = int(os.getenv("PORT", "3000"))
        except ValueError:
            self.port = 3000


CONFIG: Final[_Config] = _Config()
