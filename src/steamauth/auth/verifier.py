"""The check_authentication exchange with Steam.

A callback can be forged by anyone who can send a browser to our return_to
URL, but only Steam can answer ``is_valid:true`` for parameters it signed
itself. :func:`verify` and :func:`verify_async` replay the parameters to
Steam exactly once and share :func:`check_response` for interpreting the
answer, so both give the same result for the same provider behaviour.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

import httpx

from .callback import Cancelled, CallbackParameters, SteamId64, parse
from .errors import BadStatus, MalformedResponse, NetworkError, VerificationRejected

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    is_valid: str
    fields: Dict[str, str]

    @classmethod
    def from_body(cls, body: Union[str, bytes]) -> "VerificationResult":
        """Parse a key-value form body (``key:value`` per line)."""
        if isinstance(body, (bytes, bytearray)):
            try:
                body = bytes(body).decode("utf-8")
            except UnicodeDecodeError:
                raise MalformedResponse("body is not utf-8") from None

        fields: Dict[str, str] = {}
        for line in body.split("\n"):
            line = line.rstrip("\r")
            if ":" not in line:
                if line.strip():
                    logger.debug("Ignoring line without separator: %r", line)
                continue
            key, value = line.split(":", 1)
            if key in fields and fields[key] != value:
                raise MalformedResponse(f"conflicting values for {key!r}")
            fields[key] = value

        if "is_valid" not in fields:
            raise MalformedResponse("no is_valid entry")
        return cls(is_valid=fields["is_valid"], fields=fields)


def check_response(params: CallbackParameters, status_code: int, body: Union[str, bytes]) -> SteamId64:
    """Interpret Steam's answer to the request from ``params.verification_request()``."""
    if not 200 <= status_code < 300:
        raise BadStatus(status_code)
    result = VerificationResult.from_body(body)
    if result.is_valid != "true":
        raise VerificationRejected(result.is_valid)
    return params.steam_id


def verify(http_client: httpx.Client, params: CallbackParameters) -> SteamId64:
    request = params.verification_request()
    logger.debug("Sending check_authentication for %s", params.steam_id)
    try:
        resp = http_client.post(request.url, content=request.body, headers=dict(request.headers))
    except httpx.HTTPError as exc:
        raise NetworkError(exc) from exc
    steam_id = check_response(params, resp.status_code, resp.content)
    logger.info("Steam confirmed login for %s", steam_id)
    return steam_id


async def verify_async(http_client: httpx.AsyncClient, params: CallbackParameters) -> SteamId64:
    request = params.verification_request()
    logger.debug("Sending check_authentication for %s", params.steam_id)
    try:
        resp = await http_client.post(request.url, content=request.body, headers=dict(request.headers))
    except httpx.HTTPError as exc:
        raise NetworkError(exc) from exc
    steam_id = check_response(params, resp.status_code, resp.content)
    logger.info("Steam confirmed login for %s", steam_id)
    return steam_id


def verify_querystring(
    http_client: httpx.Client, raw: Union[str, bytes], return_to: Optional[str] = None
) -> Union[SteamId64, Cancelled]:
    params = parse(raw, return_to=return_to)
    if isinstance(params, Cancelled):
        return params
    return verify(http_client, params)


async def verify_querystring_async(
    http_client: httpx.AsyncClient, raw: Union[str, bytes], return_to: Optional[str] = None
) -> Union[SteamId64, Cancelled]:
    params = parse(raw, return_to=return_to)
    if isinstance(params, Cancelled):
        return params
    return await verify_async(http_client, params)
