"""
Timer subsystem.

Components:
- timer_models.py: data structures (Task, TimerKind, Color) + time formatting
- tick_driver.py: per-task asyncio tick handles, start/pause/reset
- task_list.py: ordered session list of cards
- config_store.py: JSON-backed named configurations
- timer_api.py: small high-level helpers used by the CLI
"""
