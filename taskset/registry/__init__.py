"""Registry components: task definitions and task sets"""

from taskset.registry.task import Task
from taskset.registry.task_set import TaskSet, get_default_set

__all__ = [
    "Task",
    "TaskSet",
    "get_default_set",
]
