"""Plattform → Cron-Backend.

Linux-Systeme lesen zuverlässig /etc/cron.d und bekommen eine eigene
Datei pro Job. Alle anderen Unix-Systeme (Solaris, AIX, die BSDs, macOS,
HP-UX, ...) pflegen den Job in der Crontab des Benutzers. Nur Plattformen
ganz ohne Cron werden abgelehnt.
"""

from __future__ import annotations

from agentcron.errors import UnsupportedPlatformError
from agentcron.models import CronBackend

# Plattformen und Plattform-Familien mit /etc/cron.d
CRON_DIRECTORY_PLATFORMS = frozenset(
    [
        "linux",
        "debian",
        "ubuntu",
        "linuxmint",
        "raspbian",
        "rhel",
        "redhat",
        "centos",
        "clearos",
        "fedora",
        "amazon",
        "oracle",
        "rocky",
        "almalinux",
        "scientific",
        "suse",
        "sles",
        "opensuse",
        "opensuseleap",
        "arch",
        "manjaro",
        "gentoo",
        "alpine",
    ]
)

# Kein Cron vorhanden
NO_CRON_PLATFORMS = frozenset(["windows", "mswin", "mingw32", "cygwin"])


def select_backend(platform: str, family: str | None = None) -> CronBackend:
    """Wählt das Cron-Backend für eine Plattform.

    Args:
        platform: Plattform-Kennung, z.B. ``"linux"``, ``"ubuntu"``, ``"solaris"``.
        family: Optionale Plattform-Familie (z.B. ``"debian"`` für ``"pop"``);
            eine Linux-Familie wählt ebenfalls cron.d.

    Raises:
        UnsupportedPlatformError: Für leere Kennungen und Plattformen ohne
            Cron (z.B. ``"windows"``).
    """
    key = platform.strip().lower()
    if not key or key in NO_CRON_PLATFORMS:
        raise UnsupportedPlatformError(platform)
    if key in CRON_DIRECTORY_PLATFORMS:
        return CronBackend.CRON_DIRECTORY
    if family is not None and family.strip().lower() in CRON_DIRECTORY_PLATFORMS:
        return CronBackend.CRON_DIRECTORY
    return CronBackend.LEGACY_CRONTAB
