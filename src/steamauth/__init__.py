"""Sign users in through Steam's OpenID 2.0 provider."""

version_info = (0, 1, 0)

__version__ = ".".join(str(x) for x in version_info)
