from __future__ import annotations
import logging
from typing import AsyncIterator, Union
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import httpx

from ..config import get_settings, Settings
from ..auth.callback import Cancelled, parse
from ..auth.errors import (
    BadStatus,
    MalformedResponse,
    NetworkError,
    ParseError,
    VerificationRejected,
)
from ..auth.openid import Redirector
from ..auth.verifier import verify_async
from ..steam.client import make_async_client

logger = logging.getLogger(__name__)

SIGN_IN_BUTTON = "https://steamcommunity-a.akamaihd.net/public/images/signinthroughsteam/sits_01.png"


class LoginOut(BaseModel):
    steamid: str


class StatusOut(BaseModel):
    status: str

router = APIRouter()


def get_settings_dep() -> Settings:
    return get_settings()


def get_redirector(settings: Settings = Depends(get_settings_dep)) -> Redirector:
    return Redirector(settings.realm, settings.callback_path)


async def get_http_client(settings: Settings = Depends(get_settings_dep)) -> AsyncIterator[httpx.AsyncClient]:
    async with make_async_client(settings.http_timeout) as client:
        yield client


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/", response_class=HTMLResponse)
def index():
    return f'<a href="/login"><img src="{SIGN_IN_BUTTON}" alt="Sign in through Steam"></a>'


@router.get("/login")
def login(redirector: Redirector = Depends(get_redirector)):
    return redirector.create_response()


@router.get("/callback", response_model=Union[LoginOut, StatusOut])
async def callback(
    request: Request,
    redirector: Redirector = Depends(get_redirector),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        params = parse(request.url.query, return_to=redirector.return_to)
    except ParseError as exc:
        logger.warning("Rejected callback: %s", exc)
        raise HTTPException(400, str(exc))
    if isinstance(params, Cancelled):
        return StatusOut(status="cancelled")

    try:
        steam_id = await verify_async(client, params)
    except (NetworkError, BadStatus) as exc:
        logger.error("Could not reach steam: %s", exc)
        raise HTTPException(502, "could not verify login with steam")
    except (VerificationRejected, MalformedResponse) as exc:
        logger.warning("Login not confirmed: %s", exc)
        raise HTTPException(401, "steam did not confirm the login")
    return LoginOut(steamid=str(steam_id))
