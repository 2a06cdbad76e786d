"""agentcron · Periodische Client-Läufe als Cron-Einträge."""

__version__ = "0.1.0"
