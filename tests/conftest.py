"""
agentcron · Shared Test-Fixtures.

Tests nutzen eine feste Knoten-Identität und ein temporäres
Verzeichnis statt ~/.agentcron/, damit sie reproduzierbar bleiben.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from agentcron.config import AgentCronConfig, NodeConfig
from agentcron.cron.compiler import JobCompiler
from agentcron.models import JobDescriptor, SeedSource

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def config() -> AgentCronConfig:
    """Linux-Config mit fester Knoten-Identität."""
    return AgentCronConfig(platform="linux", node=NodeConfig(name="node1.example.com"))


@pytest.fixture
def compiler(config: AgentCronConfig) -> JobCompiler:
    """Compiler mit der Linux-Config."""
    return JobCompiler(config)


@pytest.fixture
def seed() -> SeedSource:
    """Feste Knoten-Identität."""
    return SeedSource(node_name="node1.example.com")


@pytest.fixture
def descriptor() -> JobDescriptor:
    """Descriptor mit allen Defaults."""
    return JobDescriptor()


@pytest.fixture
def tmp_agentcron_home(tmp_path: Path) -> Path:
    """Temporäres agentcron-Home-Verzeichnis."""
    return tmp_path / ".agentcron"
