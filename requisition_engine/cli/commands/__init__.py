"""
CLI команды.

Каждый модуль содержит обработчик команды:
- validate.py: validate
- stats.py: stats
"""

from .validate import cmd_validate
from .stats import cmd_stats

__all__ = [
    "cmd_validate",
    "cmd_stats",
]
