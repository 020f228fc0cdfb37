# config.py
# env-driven settings (.env honoured via python-dotenv)

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    google_maps_api_key: str = ""
    # seconds
    provider_timeout_s: int = 5
    geocode_timeout_s: int = 5
    candidate_limit: int = 12
    default_max_distance_miles: int = 30

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY", "").strip(),
            provider_timeout_s=_int_env("PROVIDER_TIMEOUT_S", 5),
            geocode_timeout_s=_int_env("GEOCODE_TIMEOUT_S", 5),
            candidate_limit=_int_env("CANDIDATE_LIMIT", 12),
            default_max_distance_miles=_int_env("DEFAULT_MAX_DISTANCE_MILES", 30),
        )


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
