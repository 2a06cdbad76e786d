"""Splay: deterministische Startverzögerung pro Knoten.

Verteilt die Startzeitpunkte vieler Knoten mit demselben Zeitplan über
das Splay-Fenster. Für einen Knoten bleibt die Verzögerung über
wiederholte Kompilierungen gleich, damit der Cron-Eintrag nicht bei
jedem Lauf als geändert gilt.
"""

from __future__ import annotations

import hashlib
import random

from agentcron.errors import InvalidSplayError
from agentcron.models import SeedSource


def seed_for(source: SeedSource) -> int:
    """Ermittelt den Seed: expliziter shard_seed, sonst MD5 des Knotennamens."""
    if source.shard_seed is not None:
        return int(source.shard_seed)
    return int(hashlib.md5(source.node_name.encode("utf-8")).hexdigest(), 16)


def splay_sleep_time(splay: int, seed: int) -> int:
    """Gleichverteilte Ganzzahl in ``[0, splay)`` für einen Seed.

    Raises:
        InvalidSplayError: Wenn splay keine positive Ganzzahl ist.
    """
    if isinstance(splay, bool) or not isinstance(splay, int) or splay <= 0:
        raise InvalidSplayError(splay)
    if splay == 1:
        return 0
    return random.Random(seed).randrange(splay)
