from __future__ import annotations


class SteamAuthError(Exception):
    """Base class for every error raised by steamauth."""


class InvalidUrl(SteamAuthError, ValueError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"invalid url {url!r}: {reason}")
        self.url = url
        self.reason = reason


# callback parameters rejected before any network call


class ParseError(SteamAuthError):
    pass


class MissingField(ParseError):
    def __init__(self, name: str):
        super().__init__(f"missing openid.{name}")
        self.name = name


class DuplicateField(ParseError):
    def __init__(self, name: str):
        super().__init__(f"openid.{name} given more than once")
        self.name = name


class UnexpectedNamespace(ParseError):
    def __init__(self, value: str):
        super().__init__(f"unexpected openid.ns {value!r}")
        self.value = value


class UnexpectedMode(ParseError):
    def __init__(self, mode: str):
        super().__init__(f"unexpected openid.mode {mode!r}")
        self.mode = mode


class UnexpectedEndpoint(ParseError):
    def __init__(self, value: str):
        super().__init__(f"unexpected openid.op_endpoint {value!r}")
        self.value = value


class MalformedClaimedId(ParseError):
    def __init__(self, value: str):
        super().__init__(f"malformed openid.claimed_id {value!r}")
        self.value = value


class UnsignedRequiredField(ParseError):
    def __init__(self, name: str):
        super().__init__(f"openid.{name} is not listed in openid.signed")
        self.name = name


class ReturnToMismatch(ParseError):
    def __init__(self, expected: str, actual: str):
        super().__init__(f"openid.return_to {actual!r} does not match {expected!r}")
        self.expected = expected
        self.actual = actual


# failures of the check_authentication exchange


class VerifyError(SteamAuthError):
    pass


class NetworkError(VerifyError):
    def __init__(self, cause: Exception):
        super().__init__(f"request to steam failed: {cause}")
        self.cause = cause


class BadStatus(VerifyError):
    def __init__(self, code: int):
        super().__init__(f"steam answered with HTTP {code}")
        self.code = code


class MalformedResponse(VerifyError):
    def __init__(self, reason: str):
        super().__init__(f"malformed check_authentication response: {reason}")
        self.reason = reason


class VerificationRejected(VerifyError):
    def __init__(self, value: str):
        super().__init__(f"steam did not confirm the login (is_valid={value!r})")
        self.value = value
