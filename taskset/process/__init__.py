"""Process helpers for task bodies"""

from taskset.process.command import Command

__all__ = ["Command"]
