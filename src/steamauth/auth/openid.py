from __future__ import annotations
import posixpath
import urllib.parse

from fastapi.responses import RedirectResponse

from .errors import InvalidUrl

STEAM_OPENID_ENDPOINT = "https://steamcommunity.com/openid/login"
OPENID2_NS = "http://specs.openid.net/auth/2.0"
IDENTIFIER_SELECT = "http://specs.openid.net/auth/2.0/identifier_select"


def _check_absolute(url: str) -> urllib.parse.SplitResult:
    try:
        parts = urllib.parse.urlsplit(url)
        parts.port  # raises on a non-numeric port
    except ValueError as exc:
        raise InvalidUrl(url, str(exc)) from exc
    if parts.scheme not in ("http", "https"):
        raise InvalidUrl(url, "scheme must be http or https")
    if not parts.hostname:
        raise InvalidUrl(url, "no host")
    if parts.fragment:
        raise InvalidUrl(url, "fragments are not allowed")
    return parts


def _within_realm(realm: urllib.parse.SplitResult, return_to: urllib.parse.SplitResult) -> bool:
    if (realm.scheme, realm.hostname, realm.port) != (return_to.scheme, return_to.hostname, return_to.port):
        return False
    base = realm.path or "/"
    path = posixpath.normpath(return_to.path or "/")
    if base.endswith("/"):
        return (path + "/").startswith(base)
    return path == base or path.startswith(base + "/")


class Redirector:
    """Builds the URL that starts a 'login with Steam' round-trip.

    The realm identifies the site to the user on Steam's sign-in page; the
    callback path is joined onto it to form ``openid.return_to``, where Steam
    sends the browser back with the signed assertion.
    """

    def __init__(self, realm: str, callback_path: str):
        realm_parts = _check_absolute(realm)
        try:
            return_to = urllib.parse.urljoin(realm, callback_path)
        except ValueError as exc:
            raise InvalidUrl(callback_path, str(exc)) from exc
        return_parts = _check_absolute(return_to)
        if not _within_realm(realm_parts, return_parts):
            raise InvalidUrl(return_to, f"return_to is outside of realm {realm!r}")

        self.realm = realm
        self.return_to = return_to
        params = {
            "openid.ns": OPENID2_NS,
            "openid.mode": "checkid_setup",
            "openid.claimed_id": IDENTIFIER_SELECT,
            "openid.identity": IDENTIFIER_SELECT,
            "openid.return_to": return_to,
            "openid.realm": realm,
        }
        self._url = f"{STEAM_OPENID_ENDPOINT}?{urllib.parse.urlencode(params)}"

    def url(self) -> str:
        return self._url

    def create_response(self) -> RedirectResponse:
        """302 response that sends the browser to Steam's sign-in page."""
        return RedirectResponse(self._url, status_code=302)

    def __repr__(self) -> str:
        return f"Redirector(realm={self.realm!r}, return_to={self.return_to!r})"


def get_login_url(realm: str, callback_path: str) -> str:
    return Redirector(realm, callback_path).url()
