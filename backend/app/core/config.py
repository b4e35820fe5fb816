import os
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"

# Environment variable -> settings field
ENV_OVERRIDES = {
    "LICHESS_URL": "lichess_url",
    "FETCH_TIMEOUT_SECONDS": "fetch_timeout_seconds",
    "HOST": "host",
    "PORT": "port",
    "STATIC_DIR": "static_dir",
    "LOG_LEVEL": "log_level",
    "CORS_ORIGINS": "cors_origins",
}

class Settings(BaseModel):
    lichess_url: str = "https://lichess.org"
    fetch_timeout_seconds: float = 15.0
    host: str = "0.0.0.0"
    port: int = 10000
    static_dir: str = "public"
    log_level: str = "INFO"
    cors_origins: List[str] = []

def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Builds the settings from the YAML defaults, then applies environment overrides.
    A missing YAML file is not an error: the model defaults apply.
    """
    path = Path(config_path or os.getenv("APP_CONFIG") or DEFAULT_CONFIG_PATH)
    data = {}
    if path.exists():
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

    for env_name, field in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None or value == "":
            continue
        if field == "cors_origins":
            data[field] = [origin.strip() for origin in value.split(",") if origin.strip()]
        else:
            data[field] = value

    return Settings(**data)

# Singleton instance
settings = load_settings()
