"""Core components for taskset"""

from taskset.core.invocation import Invocation
from taskset.core.options import OptionSet, format_option_name
from taskset.core.parameter import Option, Parameter
from taskset.core.resolver import build_table, resolve
from taskset.core.task_invocation import Mark, TaskInvocation

__all__ = [
    "Invocation",
    "OptionSet",
    "format_option_name",
    "Option",
    "Parameter",
    "build_table",
    "resolve",
    "Mark",
    "TaskInvocation",
]
