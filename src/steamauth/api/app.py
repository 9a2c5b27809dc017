from __future__ import annotations
from typing import Optional
from fastapi import FastAPI

from .. import __version__
from ..config import Settings
from .routes import router, get_settings_dep


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(title="steamauth", version=__version__)
    app.include_router(router)
    if settings is not None:
        app.dependency_overrides[get_settings_dep] = lambda: settings
    return app
