"""
agentcron · Configuration system.

Loads configuration from:
  1. Defaults (defined here)
  2. ~/.agentcron/config.yaml (overrides defaults)
  3. Environment variables AGENTCRON_* (overrides everything)

Also resolves the platform-dependent defaults of a job descriptor once,
before validation.
"""

from __future__ import annotations

import logging
import os
import socket
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from agentcron.errors import ConfigError
from agentcron.models import JobDescriptor
from agentcron.utils.logging import setup_logging

log = logging.getLogger(__name__)

# ============================================================================
# Konfigurationsmodelle
# ============================================================================


class DistributionConfig(BaseModel):
    """Branding und Pfade der Client-Distribution."""

    client_name: str = "chef-client"
    dir_suffix: str = "chef"
    conf_dir: str = "/etc/chef"
    config_file_name: str = "client.rb"
    license_flag: str = "--chef-license accept"

    @property
    def binary_path(self) -> str:
        """Installationspfad des Clients, z.B. /opt/chef/bin/chef-client."""
        return f"/opt/{self.dir_suffix}/bin/{self.client_name}"


class NodeConfig(BaseModel):
    """Identität des Knotens für die Splay-Berechnung."""

    name: str = Field(default_factory=socket.getfqdn)
    shard_seed: int | None = None  # Hat Vorrang vor dem Hash von name


class LoggingConfig(BaseModel):
    """Logging-Einstellungen."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_logs: bool = False
    log_dir: Path | None = None  # None = keine Datei-Logs
    console: bool = True


def detect_platform() -> str:
    """Plattform-Kennung des laufenden Systems (linux, mac_os_x, freebsd, ...)."""
    name = sys.platform
    if name.startswith("linux"):
        return "linux"
    if name == "darwin":
        return "mac_os_x"
    if name.startswith("sunos"):
        return "solaris2"
    if name.startswith("aix"):
        return "aix"
    for bsd in ("freebsd", "openbsd", "netbsd"):
        if name.startswith(bsd):
            return bsd
    if name in ("win32", "cygwin"):
        return "windows"
    return name


class AgentCronConfig(BaseModel):
    """Complete agentcron configuration.

    Loaded once by the surrounding tool and passed to the compiler.
    """

    platform: str = Field(default_factory=detect_platform)
    platform_family: str | None = None  # z.B. "debian" für Derivate ohne eigenen Eintrag
    distribution: DistributionConfig = Field(default_factory=DistributionConfig)
    node: NodeConfig = Field(default_factory=NodeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# ============================================================================
# Config-Laden
# ============================================================================


# Sektionen von AgentCronConfig; alles andere ist ein Top-Level-Schlüssel
_SECTIONS = ("distribution", "node", "logging")


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Wendet AGENTCRON_* Umgebungsvariablen an.

    Konvention: AGENTCRON_SECTION_KEY → data["section"]["key"],
    sonst AGENTCRON_KEY → data["key"].
    Beispiele: AGENTCRON_NODE_SHARD_SEED → data["node"]["shard_seed"],
    AGENTCRON_PLATFORM_FAMILY → data["platform_family"]
    """
    prefix = "AGENTCRON_"
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        name = key[len(prefix):].lower()
        section, _, leaf = name.partition("_")
        if section in _SECTIONS and leaf:
            target = data.get(section)
            if not isinstance(target, dict):
                target = data[section] = {}
            target[leaf] = value
        elif name:
            data[name] = value
    return data


def load_config(config_path: Path | None = None) -> AgentCronConfig:
    """Lädt die Konfiguration.

    Reihenfolge (spätere überschreiben frühere):
      1. Defaults (in den Pydantic-Modellen)
      2. config.yaml (wenn vorhanden)
      3. AGENTCRON_* Umgebungsvariablen

    Args:
        config_path: Expliziter Pfad zur config.yaml. Wenn None: ~/.agentcron/config.yaml

    Returns:
        Vollständig validierte AgentCronConfig.

    Raises:
        ConfigError: Wenn die Werte die Validierung nicht bestehen.
    """
    data: dict[str, Any] = {}

    if config_path is None:
        config_path = Path.home() / ".agentcron" / "config.yaml"

    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                file_data = yaml.safe_load(f) or {}
            if isinstance(file_data, dict):
                data = file_data
        except yaml.YAMLError as exc:
            log.warning("Fehlerhafte config.yaml wird ignoriert: %s", exc)

    data = _apply_env_overrides(data)

    try:
        return AgentCronConfig(**data)
    except ValidationError as exc:
        raise ConfigError(
            f"Invalid configuration in {config_path}",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


def bootstrap(config_path: Path | None = None) -> AgentCronConfig:
    """Lädt die Konfiguration und initialisiert das Logging danach."""
    config = load_config(config_path)
    setup_logging(
        level=config.logging.level,
        log_dir=config.logging.log_dir,
        json_logs=config.logging.json_logs,
        console=config.logging.console,
    )
    return config


# ============================================================================
# Plattformabhängige Job-Defaults
# ============================================================================


def default_log_directory(platform: str, distribution: DistributionConfig) -> str:
    """Log-Verzeichnis: /Library/Logs/<Suffix> auf macOS, sonst /var/log/<suffix>."""
    if platform == "mac_os_x":
        return f"/Library/Logs/{distribution.dir_suffix.capitalize()}"
    return f"/var/log/{distribution.dir_suffix}"


def resolve_descriptor(raw: Mapping[str, Any], config: AgentCronConfig) -> JobDescriptor:
    """Füllt fehlende Felder mit Distributions- und Plattform-Defaults.

    Explizit gesetzte Werte in raw gewinnen immer.

    Raises:
        InvalidFieldError, InvalidSplayError, JobValidationError
    """
    dist = config.distribution
    defaults: dict[str, Any] = {
        "job_name": dist.client_name,
        "config_directory": dist.conf_dir,
        "binary_path": dist.binary_path,
        "log_directory": default_log_directory(config.platform, dist),
    }
    return JobDescriptor.build(**{**defaults, **raw})
