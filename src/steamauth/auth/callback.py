"""Parsing of the query string Steam appends to ``openid.return_to``.

Everything in the callback is attacker-controlled until Steam confirms it,
so :func:`parse` rejects anything structurally wrong before a single byte
is sent to Steam.
"""
from __future__ import annotations
import re
import urllib.parse
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple, Union

from .errors import (
    DuplicateField,
    MalformedClaimedId,
    MissingField,
    ReturnToMismatch,
    UnexpectedEndpoint,
    UnexpectedMode,
    UnexpectedNamespace,
    UnsignedRequiredField,
)
from .openid import OPENID2_NS, STEAM_OPENID_ENDPOINT

# Fields Steam signs on every positive assertion. This is observed provider
# behaviour, not something the OpenID 2.0 protocol guarantees.
STEAM_SIGNED_FIELDS = (
    "signed",
    "op_endpoint",
    "claimed_id",
    "identity",
    "return_to",
    "response_nonce",
    "assoc_handle",
)

# Fields a positive assertion must carry besides ns/mode/signed.
REQUIRED_FIELDS = (
    "op_endpoint",
    "claimed_id",
    "return_to",
    "response_nonce",
    "assoc_handle",
    "sig",
)

CLAIMED_ID_RE = re.compile(r"https://steamcommunity\.com/openid/id/([0-9]+)", re.ASCII)

MAX_STEAM_ID = 2**64 - 1


class SteamId64(int):
    """64-bit Steam account identifier."""

    def __new__(cls, value: int):
        value = int(value)
        if not 0 <= value <= MAX_STEAM_ID:
            raise ValueError(f"{value} is not an unsigned 64-bit integer")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"SteamId64({int(self)})"

    __str__ = int.__repr__


@dataclass(frozen=True)
class Cancelled:
    """The user declined to sign in on Steam's page (``openid.mode=cancel``)."""


@dataclass(frozen=True)
class VerificationRequest:
    url: str
    body: bytes
    headers: Mapping[str, str] = field(
        default_factory=lambda: {"Content-Type": "application/x-www-form-urlencoded"}
    )
    method: str = "POST"


@dataclass(frozen=True)
class CallbackParameters:
    """A structurally valid ``id_res`` callback.

    ``fields`` holds every ``openid.*`` parameter keyed without the
    ``openid.`` prefix, in the order Steam sent them.
    """

    fields: Tuple[Tuple[str, str], ...]
    steam_id: SteamId64
    signed: Tuple[str, ...]

    def get(self, name: str) -> Optional[str]:
        for key, value in self.fields:
            if key == name:
                return value
        return None

    @property
    def claimed_id(self) -> str:
        return self.get("claimed_id")

    @property
    def return_to(self) -> str:
        return self.get("return_to")

    def verification_request(self) -> VerificationRequest:
        """The same parameters re-sent to Steam as a check_authentication POST."""
        pairs = [
            ("openid." + key, "check_authentication" if key == "mode" else value)
            for key, value in self.fields
        ]
        body = urllib.parse.urlencode(pairs).encode("ascii")
        return VerificationRequest(url=STEAM_OPENID_ENDPOINT, body=body)


def _decode(raw: Union[str, bytes]) -> Dict[str, str]:
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8", "replace")
    raw = raw.lstrip("?")
    fields: Dict[str, str] = {}
    for key, value in urllib.parse.parse_qsl(raw, keep_blank_values=True):
        if not key.startswith("openid."):
            continue
        name = key[len("openid."):]
        if name in fields:
            raise DuplicateField(name)
        fields[name] = value
    return fields


def _same_url(expected: str, actual: str) -> bool:
    try:
        a = urllib.parse.urlsplit(expected)
        b = urllib.parse.urlsplit(actual)
        return (a.scheme, a.hostname, a.port, a.path or "/") == (b.scheme, b.hostname, b.port, b.path or "/")
    except ValueError:
        return False


def parse(raw: Union[str, bytes], return_to: Optional[str] = None) -> Union[CallbackParameters, Cancelled]:
    """Validate a raw callback query string.

    Returns :class:`CallbackParameters` for a positive assertion or
    :class:`Cancelled` when the user declined, and raises a
    :class:`~steamauth.auth.errors.ParseError` subclass for anything else.
    When ``return_to`` is given, ``openid.return_to`` must point at it.
    """
    fields = _decode(raw)

    mode = fields.get("mode")
    if mode is None:
        raise MissingField("mode")
    if mode == "cancel":
        return Cancelled()

    ns = fields.get("ns")
    if ns is None:
        raise MissingField("ns")
    if ns != OPENID2_NS:
        raise UnexpectedNamespace(ns)
    if mode != "id_res":
        raise UnexpectedMode(mode)

    if "signed" not in fields:
        raise MissingField("signed")
    for name in REQUIRED_FIELDS:
        if name not in fields:
            raise MissingField(name)

    if fields["op_endpoint"] != STEAM_OPENID_ENDPOINT:
        raise UnexpectedEndpoint(fields["op_endpoint"])

    claimed_id = fields["claimed_id"]
    match = CLAIMED_ID_RE.fullmatch(claimed_id)
    if match is None:
        raise MalformedClaimedId(claimed_id)
    try:
        steam_id = SteamId64(int(match.group(1)))
    except ValueError:
        raise MalformedClaimedId(claimed_id) from None

    signed = tuple(fields["signed"].split(","))
    for name in STEAM_SIGNED_FIELDS:
        if name not in signed:
            raise UnsignedRequiredField(name)
    for name in signed:
        if name not in fields:
            raise MissingField(name)

    if return_to is not None and not _same_url(return_to, fields["return_to"]):
        raise ReturnToMismatch(return_to, fields["return_to"])

    return CallbackParameters(fields=tuple(fields.items()), steam_id=steam_id, signed=signed)
