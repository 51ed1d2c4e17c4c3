"""Reactor configuration."""

import os
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SchedulingPolicy(Enum):
    """How settled cells deliver to listeners registered after settlement.

    Listeners registered before settlement always fire together on the next
    turn. The policies differ only for late registrations:

    - SOON: late listeners join a batched flush on the next turn.
    - TIMER: each late listener gets its own timer callback.
    """

    SOON = "soon"
    TIMER = "timer"


class ReactorConfig(BaseModel):
    """Scheduling settings for the reactor.

    Environment variables:
        WATE_SCHEDULING_POLICY: "soon" (default) or "timer"
        WATE_TIMER_DELAY: delay in seconds for timer callbacks (default 0)
    """

    model_config = ConfigDict(frozen=True)

    policy: SchedulingPolicy = SchedulingPolicy.SOON
    timer_delay: float = Field(default=0.0, ge=0.0)

    @classmethod
    def from_env(cls) -> "ReactorConfig":
        """Load configuration from the process environment.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        return cls(
            policy=os.environ.get("WATE_SCHEDULING_POLICY", SchedulingPolicy.SOON.value),
            timer_delay=os.environ.get("WATE_TIMER_DELAY", "0"),
        )
