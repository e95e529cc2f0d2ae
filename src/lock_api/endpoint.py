"""Lock API endpoint discovery from remote configuration."""

import re
from typing import Protocol
from urllib.parse import urlsplit

# user@host:path/to/repo
SCP_PATTERN = re.compile(r"^(?:(?P<user>[^@/]+)@)?(?P<host>[^:/]{2,}):(?P<path>[^/].*)$")


class ConfigSource(Protocol):
    def config(self, key: str) -> str | None: ...

    def remote_url(self, remote: str) -> str | None: ...


class EndpointError(Exception):
    """Raised when no lock API endpoint can be determined."""


def _with_lfs_suffix(host: str, path: str, scheme: str = "https") -> str:
    path = path.strip("/")
    if not path.endswith(".git"):
        path += ".git"
    return f"{scheme}://{host}/{path}/info/lfs"


def lfs_url_from_remote(url: str) -> str:
    """Derive the LFS API base URL from a git remote URL."""
    if "://" not in url:
        match = SCP_PATTERN.match(url)
        if not match:
            raise EndpointError(f"cannot derive lock endpoint from remote URL {url!r}")
        return _with_lfs_suffix(match["host"], match["path"])

    parts = urlsplit(url)
    match parts.scheme:
        case "http" | "https":
            base = url.rstrip("/")
            if base.endswith(".git"):
                return f"{base}/info/lfs"
            return f"{base}.git/info/lfs"
        case "ssh" | "git+ssh" | "ssh+git" | "git":
            if not parts.hostname:
                raise EndpointError(f"remote URL {url!r} has no host")
            return _with_lfs_suffix(parts.hostname, parts.path)
        case _:
            raise EndpointError(f"unsupported remote URL scheme {parts.scheme!r}")


def endpoint_for_remote(
    repository: ConfigSource,
    remote: str,
    override: str | None = None,
) -> str:
    """Lock API base URL for a remote, honouring explicit overrides."""
    if override:
        return override.rstrip("/")

    for key in (f"remote.{remote}.lfsurl", "lfs.url"):
        configured = repository.config(key)
        if configured:
            return configured.rstrip("/")

    url = repository.remote_url(remote)
    if url is None:
        # A bare URL may be given in place of a remote name
        if "://" in remote or SCP_PATTERN.match(remote):
            url = remote
        else:
            raise EndpointError(f"remote {remote!r} has no URL configured")

    return lfs_url_from_remote(url)
