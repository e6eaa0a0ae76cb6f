"""Workflow settings read from the environment.

MARKETPLACE_OVERCOMMIT_POLICY: "clamp" (default) or "reject"
MARKETPLACE_MAX_WRITE_ATTEMPTS: positive integer, default 3
"""

import os
from dataclasses import dataclass

from marketplace.crop.crop import OvercommitPolicy

DEFAULT_MAX_WRITE_ATTEMPTS = 3


@dataclass(frozen=True)
class WorkflowSettings:
    overcommit_policy: OvercommitPolicy = OvercommitPolicy.CLAMP
    max_write_attempts: int = DEFAULT_MAX_WRITE_ATTEMPTS

    def __post_init__(self):
        object.__setattr__(self, "overcommit_policy", OvercommitPolicy(self.overcommit_policy))
        if self.max_write_attempts < 1:
            raise ValueError(f"max_write_attempts must be at least 1, got {self.max_write_attempts}")

    @classmethod
    def from_env(cls) -> "WorkflowSettings":
        policy = os.environ.get("MARKETPLACE_OVERCOMMIT_POLICY", OvercommitPolicy.CLAMP.value).strip().lower()
        attempts = os.environ.get("MARKETPLACE_MAX_WRITE_ATTEMPTS", str(DEFAULT_MAX_WRITE_ATTEMPTS))
        return cls(overcommit_policy=OvercommitPolicy(policy), max_write_attempts=int(attempts))
