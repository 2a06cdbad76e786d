"""agentcron cron module -- Kompilierung periodischer Client-Läufe zu Cron-Einträgen.

Submodule:
  fields    Grammatik und Wertebereiche der Cron-Felder
  splay     Deterministische Startverzögerung pro Knoten
  backends  Plattform → Cron-Backend
  compiler  JobCompiler (validate, splay_delay, compile_command, select_backend)
  actions   add_job / remove_job gegen externe Kollaborateure
"""
