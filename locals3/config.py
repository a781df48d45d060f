import os
from pathlib import Path

from pydantic import BaseModel


class Settings(BaseModel):
    storage_root: Path = Path("storage")
    log_level: str = "INFO"
    log_json: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            storage_root=os.environ.get("LOCALS3_STORAGE_ROOT", str(defaults.storage_root)),
            log_level=os.environ.get("LOCALS3_LOG_LEVEL", defaults.log_level),
            log_json=os.environ.get("LOCALS3_LOG_JSON", "0").lower() in ("1", "true", "yes"),
            host=os.environ.get("LOCALS3_HOST", defaults.host),
            port=os.environ.get("LOCALS3_PORT", defaults.port),
        )
