"""
agentcron · Central data models.

All Pydantic models used across modules.

Design principles:
  - Immutable (frozen) throughout: a changed job is a new descriptor
  - Strict validation at construction time (no invalid descriptor exists)
  - Typed errors from agentcron.errors instead of raw pydantic errors
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from agentcron.cron.fields import CRON_FIELDS, validate_field
from agentcron.errors import AgentCronError, InvalidFieldError, InvalidSplayError, JobValidationError

# ============================================================================
# Defaults der Standard-Distribution
# ============================================================================

DEFAULT_CLIENT_NAME = "chef-client"
DEFAULT_CONFIG_DIRECTORY = "/etc/chef"
DEFAULT_LOG_DIRECTORY = "/var/log/chef"
DEFAULT_LOG_FILE_NAME = "client.log"
DEFAULT_BINARY_PATH = "/opt/chef/bin/chef-client"
DEFAULT_SPLAY = 300

# Lokaler Benutzer ("root") oder Adresse ("ops@example.com")
_MAIL_RECIPIENT = re.compile(r"^[^@\s,]+(@[^@\s,]+)?$")

_ENV_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _reject_line_breaks(field: str, value: str) -> str:
    """Ein Zeilenumbruch würde zusätzliche Zeilen in den Cron-Eintrag schreiben."""
    if "\n" in value or "\r" in value:
        raise InvalidFieldError(field, value, "must not contain line breaks")
    return value


def _freeze_environment(value: Mapping[str, str]) -> Mapping[str, str]:
    """Prüft Variablennamen und -werte und gibt eine unveränderliche Sicht zurück."""
    for key, item in value.items():
        if not _ENV_NAME.match(key):
            raise InvalidFieldError("environment", key, "not a valid variable name")
        _reject_line_breaks("environment", item)
    return MappingProxyType(dict(sorted(value.items())))


def _empty_environment() -> Mapping[str, str]:
    return MappingProxyType({})


# ============================================================================
# Enums
# ============================================================================


class CronBackend(StrEnum):
    """Mechanismus, über den der Job installiert wird.

    LEGACY_CRONTAB: Eine Zeile in der Crontab des Benutzers
    CRON_DIRECTORY: Eine eigene Datei pro Job in /etc/cron.d
    """

    LEGACY_CRONTAB = "crontab"
    CRON_DIRECTORY = "cron_d"


# ============================================================================
# Job-Beschreibung
# ============================================================================


def _coerce_splay(value: Any) -> int:
    """Wandelt Integer- oder String-Eingaben in eine positive Ganzzahl."""
    if isinstance(value, bool):
        raise InvalidSplayError(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidSplayError(value)
        value = int(value)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidSplayError(value) from None
    if number <= 0:
        raise InvalidSplayError(value)
    return number


class JobDescriptor(BaseModel):
    """Deklaration eines periodischen Client-Laufs.

    Wird einmal erzeugt und nie verändert. Cron-Felder akzeptieren
    Integer und Strings und werden als String gespeichert.
    """

    model_config = ConfigDict(frozen=True)

    job_name: str = DEFAULT_CLIENT_NAME
    comment: str | None = None
    user: str = "root"

    minute: str = "0,30"
    hour: str = "*"
    day: str = "*"
    month: str = "*"
    weekday: str = "*"

    splay: int = DEFAULT_SPLAY
    mailto: str | None = None
    accept_license: bool = False

    config_directory: str = DEFAULT_CONFIG_DIRECTORY
    log_directory: str = DEFAULT_LOG_DIRECTORY
    log_file_name: str = DEFAULT_LOG_FILE_NAME
    append_log: bool = True
    binary_path: str = DEFAULT_BINARY_PATH

    daemon_options: tuple[str, ...] = ()
    environment: Mapping[str, str] = Field(default_factory=_empty_environment)

    @field_validator(*CRON_FIELDS, mode="before")
    @classmethod
    def validate_cron_field(cls, value: Any, info: Any) -> str:
        return validate_field(info.field_name, value)

    @field_validator("splay", mode="before")
    @classmethod
    def validate_splay(cls, value: Any) -> int:
        return _coerce_splay(value)

    @field_validator(
        "job_name",
        "user",
        "config_directory",
        "log_directory",
        "log_file_name",
        "binary_path",
    )
    @classmethod
    def validate_not_empty(cls, value: str, info: Any) -> str:
        if not value.strip():
            raise InvalidFieldError(info.field_name, value, "must not be empty")
        return _reject_line_breaks(info.field_name, value)

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _reject_line_breaks("comment", value)

    @field_validator("daemon_options")
    @classmethod
    def validate_daemon_options(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for option in value:
            _reject_line_breaks("daemon_options", option)
        return value

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return _freeze_environment(value)

    @field_serializer("environment")
    def serialize_environment(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @field_validator("mailto")
    @classmethod
    def validate_mailto(cls, value: str | None) -> str | None:
        if value is None:
            return None
        recipients = [part.strip() for part in value.split(",")]
        for recipient in recipients:
            if not _MAIL_RECIPIENT.match(recipient):
                raise InvalidFieldError("mailto", value, "not a mail recipient")
        return value

    @classmethod
    def build(cls, **data: Any) -> JobDescriptor:
        """Erzeugt einen Descriptor und meldet Fehler als agentcron-Fehler.

        Pydantic sammelt Validator-Fehler in Felddefinitions-Reihenfolge;
        der erste gemeldete Fehler wird unverändert weitergereicht.

        Raises:
            InvalidFieldError: Ungültiges Cron- oder Pflichtfeld.
            InvalidSplayError: Splay ist keine positive Ganzzahl.
            JobValidationError: Sonstige Typfehler (z.B. falscher Typ).
        """
        try:
            return cls(**data)
        except ValidationError as exc:
            errors = exc.errors()
            for error in errors:
                original = (error.get("ctx") or {}).get("error")
                if isinstance(original, AgentCronError):
                    raise original from exc
            first = errors[0] if errors else {}
            field = ".".join(str(part) for part in first.get("loc", ()))
            raise JobValidationError(
                f"Invalid job descriptor: {field}: {first.get('msg', exc)}",
                details={"errors": exc.errors(include_url=False, include_context=False)},
            ) from exc

    def derive(self, **changes: Any) -> JobDescriptor:
        """Neuer, erneut validierter Descriptor mit geänderten Feldern."""
        return type(self).build(**{**self.model_dump(), **changes})

    @property
    def schedule(self) -> CronSchedule:
        """Die fünf Cron-Felder als eigenes Objekt."""
        return CronSchedule(
            minute=self.minute,
            hour=self.hour,
            day=self.day,
            month=self.month,
            weekday=self.weekday,
        )


class CronSchedule(BaseModel, frozen=True):
    """Die fünf Zeitfelder eines Cron-Eintrags."""

    minute: str = "*"
    hour: str = "*"
    day: str = "*"
    month: str = "*"
    weekday: str = "*"

    @property
    def expression(self) -> str:
        """Klassischer Fünf-Felder-Ausdruck, z.B. ``"0,30 * * * *"``."""
        return " ".join((self.minute, self.hour, self.day, self.month, self.weekday))


class SeedSource(BaseModel, frozen=True):
    """Identität des Knotens für die Splay-Berechnung.

    Ein gesetzter shard_seed hat Vorrang vor dem Hash des Knotennamens.
    """

    node_name: str
    shard_seed: int | None = None


class CompiledJob(BaseModel, frozen=True):
    """Ergebnis einer Kompilierung, bereit zur Installation."""

    job_name: str
    schedule: CronSchedule
    command: str
    user: str
    backend: CronBackend
    log_directory: str
    environment: Mapping[str, str] = Field(default_factory=_empty_environment)
    mailto: str | None = None
    comment: str | None = None

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return _freeze_environment(value)

    @field_validator("comment", "command", "user")
    @classmethod
    def validate_single_line(cls, value: str | None, info: Any) -> str | None:
        if value is None:
            return None
        return _reject_line_breaks(info.field_name, value)

    @field_serializer("environment")
    def serialize_environment(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    def entry(self) -> str:
        """Rendert den Eintrag, wie das Backend ihn installieren würde.

        cron.d-Dateien enthalten eine Benutzerspalte, Crontab-Zeilen nicht.
        Umgebungsvariablen werden nach Namen sortiert, damit der Eintrag
        bei gleichem Input byte-identisch bleibt.
        """
        lines: list[str] = []
        if self.comment:
            lines.append(f"# {self.comment}")
        if self.mailto:
            lines.append(f"MAILTO={self.mailto}")
        lines.extend(f"{key}={self.environment[key]}" for key in sorted(self.environment))

        columns = [self.schedule.expression]
        if self.backend is CronBackend.CRON_DIRECTORY:
            columns.append(self.user)
        columns.append(self.command)
        lines.append(" ".join(columns))
        return "\n".join(lines) + "\n"
