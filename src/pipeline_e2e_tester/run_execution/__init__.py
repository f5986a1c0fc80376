"""Run execution domain exports."""

from .e2e_run_use_case import RunExecutionError, execute_e2e_test_run
from .run_contracts import RunOutcome, RunRequest

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RunExecutionError",
    "execute_e2e_test_run",
]
