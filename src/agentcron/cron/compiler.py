"""Job-Compiler: JobDescriptor → (CronSchedule, Kommandozeile).

Reine Transformation ohne I/O. Derselbe Descriptor mit demselben Seed
ergibt immer eine byte-identische Kommandozeile, damit ein erneutes
Anwenden der Konfiguration den Job nicht als geändert meldet.
"""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from typing import Any

from agentcron.config import AgentCronConfig, resolve_descriptor
from agentcron.cron.backends import select_backend
from agentcron.cron.fields import CRON_FIELDS, validate_field
from agentcron.cron.splay import seed_for, splay_sleep_time
from agentcron.errors import InvalidSplayError
from agentcron.models import CompiledJob, CronBackend, JobDescriptor, SeedSource
from agentcron.utils.logging import get_logger

log = get_logger(__name__)


class JobCompiler:
    """Kompiliert Job-Beschreibungen zu installierbaren Cron-Einträgen.

    Attributes:
        config: Distribution, Knoten-Identität und Plattform.
        seed_source: Standard-Seed für splay_delay().
    """

    def __init__(
        self,
        config: AgentCronConfig | None = None,
        seed_source: SeedSource | None = None,
    ) -> None:
        self.config = config or AgentCronConfig()
        self.seed_source = seed_source or SeedSource(
            node_name=self.config.node.name,
            shard_seed=self.config.node.shard_seed,
        )

    def validate(self, descriptor: JobDescriptor | Mapping[str, Any]) -> JobDescriptor:
        """Prüft die Cron-Felder und den Splay eines Descriptors.

        Felder werden in fester Reihenfolge (minute, hour, day, month,
        weekday) geprüft; der erste Fehler bricht ab.

        Args:
            descriptor: Fertiger Descriptor oder Rohwerte, die vorher mit
                den Plattform-Defaults aufgelöst werden.

        Returns:
            Der geprüfte Descriptor.

        Raises:
            InvalidFieldError: Erstes ungültiges Feld, mit Feldnamen.
            InvalidSplayError: Splay ist keine positive Ganzzahl.
        """
        if not isinstance(descriptor, JobDescriptor):
            descriptor = resolve_descriptor(descriptor, self.config)

        for name in CRON_FIELDS:
            validate_field(name, getattr(descriptor, name))

        splay = descriptor.splay
        if isinstance(splay, bool) or not isinstance(splay, int) or splay <= 0:
            raise InvalidSplayError(splay)

        return descriptor

    def splay_delay(
        self,
        descriptor: JobDescriptor,
        seed_source: SeedSource | None = None,
    ) -> int:
        """Startverzögerung in Sekunden, gleichverteilt in ``[0, splay)``.

        Args:
            descriptor: Job mit dem Splay-Fenster.
            seed_source: Abweichende Knoten-Identität; sonst die des Compilers.
        """
        source = seed_source or self.seed_source
        return splay_sleep_time(descriptor.splay, seed_for(source))

    def log_clause(self, descriptor: JobDescriptor) -> str:
        """Logging-Teil des Kommandos: ``-L <datei>`` oder Umleitung mit Überschreiben."""
        log_path = posixpath.join(descriptor.log_directory, descriptor.log_file_name)
        if descriptor.append_log:
            return f"-L {log_path}"
        return f"> {log_path} 2>&1"

    def compile_command(
        self,
        descriptor: JobDescriptor,
        seed_source: SeedSource | None = None,
    ) -> str:
        """Baut die vollständige Kommandozeile für den Cron-Eintrag.

        Reihenfolge: sleep, Binary, daemon_options, Config-Pfad,
        Lizenz-Flag, Logging, Fehlermeldung für MAILTO.
        """
        dist = self.config.distribution
        parts = [
            f"/bin/sleep {self.splay_delay(descriptor, seed_source)};",
            descriptor.binary_path,
        ]
        parts.extend(descriptor.daemon_options)
        parts.append(
            f"-c {posixpath.join(descriptor.config_directory, dist.config_file_name)}"
        )
        if descriptor.accept_license:
            parts.append(dist.license_flag)
        parts.append(self.log_clause(descriptor))
        # Ausgabe auf stdout löst die Cron-Mail an MAILTO aus
        if descriptor.mailto:
            parts.append(f'|| echo "{dist.client_name} execution failed"')

        # Nur zwischen den Klauseln normalisieren, Inhalte (z.B. Quotes) bleiben
        return " ".join(clause for clause in (part.strip() for part in parts) if clause)

    @staticmethod
    def select_backend(platform: str, family: str | None = None) -> CronBackend:
        """Cron-Backend für eine Plattform (siehe agentcron.cron.backends)."""
        return select_backend(platform, family)

    def compile(
        self,
        descriptor: JobDescriptor | Mapping[str, Any],
        platform: str | None = None,
    ) -> CompiledJob:
        """Validiert und kompiliert einen Job vollständig.

        Args:
            descriptor: Descriptor oder Rohwerte.
            platform: Zielplattform; Default ist Plattform und Familie aus der Config.

        Raises:
            InvalidFieldError, InvalidSplayError, UnsupportedPlatformError
        """
        job = self.validate(descriptor)
        if platform is None:
            backend = self.select_backend(self.config.platform, self.config.platform_family)
        else:
            backend = self.select_backend(platform)
        command = self.compile_command(job)

        log.debug(
            "cron_job_compiled",
            job_name=job.job_name,
            backend=backend.value,
            schedule=job.schedule.expression,
        )

        return CompiledJob(
            job_name=job.job_name,
            schedule=job.schedule,
            command=command,
            user=job.user,
            backend=backend,
            log_directory=job.log_directory,
            environment=job.environment,
            mailto=job.mailto,
            comment=job.comment,
        )
