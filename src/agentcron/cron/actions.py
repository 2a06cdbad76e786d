"""Aktionen add/remove gegen die externen Kollaborateure.

Das Cron-Subsystem und die Verzeichnisverwaltung gehören der
umgebenden Konfigurationssoftware; hier sind nur ihre Schnittstellen
beschrieben. Validierung und Kompilierung laufen vollständig, bevor
ein Kollaborateur aufgerufen wird.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from agentcron.cron.backends import select_backend
from agentcron.cron.compiler import JobCompiler
from agentcron.models import CompiledJob, CronBackend, JobDescriptor
from agentcron.utils.logging import get_logger

log = get_logger(__name__)

LOG_DIRECTORY_MODE = 0o750


class CronSubsystem(Protocol):
    """Installiert und entfernt Cron-Einträge."""

    def install(self, job: CompiledJob) -> None:
        """Legt den Eintrag an oder ersetzt einen gleichnamigen."""
        ...

    def remove(self, job_name: str, backend: CronBackend) -> None:
        """Entfernt den Eintrag mit diesem Namen."""
        ...


class DirectoryManager(Protocol):
    """Verwaltet Verzeichnisse auf dem Zielsystem."""

    def exists(self, path: str) -> bool:
        """True wenn das Verzeichnis existiert."""
        ...

    def ensure(self, path: str, *, owner: str, mode: int, recursive: bool) -> None:
        """Legt das Verzeichnis mit Besitzer und Modus an."""
        ...


def add_job(
    descriptor: JobDescriptor | Mapping[str, Any],
    *,
    compiler: JobCompiler,
    cron: CronSubsystem,
    directories: DirectoryManager,
    platform: str | None = None,
) -> CompiledJob:
    """Kompiliert einen Job und installiert ihn.

    Das Log-Verzeichnis wird nur angelegt, wenn es noch fehlt
    (Besitzer = Job-Benutzer, Modus 0750, rekursiv).

    Returns:
        Der installierte Job.

    Raises:
        InvalidFieldError, InvalidSplayError, UnsupportedPlatformError:
            Vor jedem Aufruf eines Kollaborateurs.
    """
    job = compiler.compile(descriptor, platform)

    if not directories.exists(job.log_directory):
        log.info("log_directory_create", path=job.log_directory, owner=job.user)
        directories.ensure(
            job.log_directory,
            owner=job.user,
            mode=LOG_DIRECTORY_MODE,
            recursive=True,
        )

    cron.install(job)
    log.info(
        "cron_job_installed",
        job_name=job.job_name,
        backend=job.backend.value,
        schedule=job.schedule.expression,
    )
    return job


def remove_job(
    job_name: str,
    *,
    cron: CronSubsystem,
    platform: str,
    family: str | None = None,
) -> None:
    """Entfernt einen Job über das Backend der Plattform."""
    backend = select_backend(platform, family)
    cron.remove(job_name, backend)
    log.info("cron_job_removed", job_name=job_name, backend=backend.value)
