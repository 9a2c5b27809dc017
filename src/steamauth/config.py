from __future__ import annotations
import os
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from dotenv import load_dotenv


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    realm: str = Field(default="http://localhost:8080", description="Site origin shown to the user by Steam")
    callback_path: str = Field(default="/callback", description="Path Steam redirects back to")
    http_timeout: float = Field(default=10.0, gt=0, description="Timeout for check_authentication, seconds")
    environment: str = Field(default="dev")

def get_settings(env_file: Optional[str] = None) -> Settings:
    if env_file and os.path.exists(env_file):
        load_dotenv(env_file)
    else:
        load_dotenv()
    data = {
        "realm": os.getenv("STEAMAUTH_REALM", "http://localhost:8080"),
        "callback_path": os.getenv("STEAMAUTH_CALLBACK_PATH", "/callback"),
        "http_timeout": os.getenv("STEAMAUTH_HTTP_TIMEOUT", "10.0"),
        "environment": os.getenv("STEAMAUTH_ENV", "dev"),
    }
    return Settings(**data)
