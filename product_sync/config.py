import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, ValidationError


class Settings(BaseModel):
    supabase_url: HttpUrl = Field(alias="SUPABASE_URL")
    supabase_key: str = Field(alias="SUPABASE_KEY")
    table: str = Field(default="products", alias="SUPABASE_TABLE")
    image_bucket: str = Field(default="product-images", alias="SUPABASE_IMAGE_BUCKET")
    image_dir: Optional[Path] = Field(default=None, alias="IMAGE_DIR")
    image_cache_seconds: int = Field(default=31536000, alias="IMAGE_CACHE_SECONDS")
    http_timeout_seconds: float = Field(default=15, alias="HTTP_TIMEOUT_SECONDS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


def _load_dotenv():
    # .env.local overrides .env, both optional.
    load_dotenv()
    local_env = Path.cwd() / ".env.local"
    if local_env.exists():
        load_dotenv(local_env, override=True)


@lru_cache()
def get_settings() -> Settings:
    _load_dotenv()
    try:
        return Settings(**os.environ)
    except ValidationError as exc:
        missing = [e["loc"][0] for e in exc.errors() if e["type"] == "missing"]
        if missing:
            detail = f"Missing required environment variables: {', '.join(missing)}"
        else:
            detail = f"Invalid configuration: {exc}"
        raise RuntimeError(detail) from exc
