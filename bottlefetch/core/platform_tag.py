"""Platform tag resolution — the key used to pick a bottle for this host.

Tags follow the Homebrew taxonomy: ``x86_64_linux`` and ``arm64_linux`` on
Linux; on macOS the release codename, prefixed with ``arm64_`` on Apple
Silicon (``arm64_sonoma``, ``sonoma``).
"""

from __future__ import annotations

import platform

from bottlefetch.core.errors import UnsupportedPlatformError

# macOS major version -> codename. 10.x releases key on "10.<minor>".
MACOS_CODENAMES: dict[str, str] = {
    "10.15": "catalina",
    "11": "big_sur",
    "12": "monterey",
    "13": "ventura",
    "14": "sonoma",
    "15": "sequoia",
    "26": "tahoe",
}

_ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
}

_LINUX_TAGS: dict[str, str] = {
    "x86_64": "x86_64_linux",
    "arm64": "arm64_linux",
}


def macos_codename(version: str) -> str:
    """Map a macOS product version (``14.4.1``) to its codename."""
    parts = version.split(".")
    key = parts[0] if parts[0] != "10" else ".".join(parts[:2])
    try:
        return MACOS_CODENAMES[key]
    except KeyError:
        raise UnsupportedPlatformError(f"Unknown macOS version: {version}") from None


def resolve_platform_tag(
    system: str,
    machine: str,
    macos_version: str | None = None,
) -> str:
    """Pure lookup from (OS family, CPU architecture) to a bottle tag."""
    arch = _ARCH_ALIASES.get(machine.lower())
    if arch is None:
        raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")

    family = system.lower()
    if family == "linux":
        return _LINUX_TAGS[arch]
    if family == "darwin":
        if not macos_version:
            raise UnsupportedPlatformError("macOS version is required to resolve a tag")
        codename = macos_codename(macos_version)
        return f"arm64_{codename}" if arch == "arm64" else codename
    raise UnsupportedPlatformError(f"Unsupported operating system: {system}")


def current_platform_tag(override: str | None = None) -> str:
    """Return the tag for this host, or ``override`` when given."""
    if override:
        return override
    return resolve_platform_tag(
        platform.system(),
        platform.machine(),
        platform.mac_ver()[0] or None,
    )
