"""Graph configuration.

Defaults can be overridden through the environment:

    AIGRAPH_MAX_STEPS   maximum node invocations per run
    AIGRAPH_TIMEOUT     seconds allowed for a whole run

Unparseable values are ignored in favour of the built-in defaults.
"""

import os
from typing import Optional
from pydantic import BaseModel, Field

from aigraph.core.logging import AigraphLoggingConfig, LogComponent, get_logger

DEFAULT_MAX_STEPS = 25

ENV_MAX_STEPS = "AIGRAPH_MAX_STEPS"
ENV_TIMEOUT = "AIGRAPH_TIMEOUT"

logger = get_logger(LogComponent.GRAPH)


def _env_max_steps() -> int:
    raw = os.environ.get(ENV_MAX_STEPS)
    if raw is None:
        return DEFAULT_MAX_STEPS
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_MAX_STEPS}={raw!r}")
        return DEFAULT_MAX_STEPS
    return value if value >= 1 else DEFAULT_MAX_STEPS


def _env_timeout() -> Optional[float]:
    raw = os.environ.get(ENV_TIMEOUT)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_TIMEOUT}={raw!r}")
        return None
    return value if value > 0 else None


class GraphConfig(BaseModel):
    """Execution limits and logging for a graph.

    Attributes:
        max_steps: Maximum node invocations per run; bounds cyclic graphs
        timeout: Optional wall-clock limit in seconds for a whole run
        logging: Logging behaviour for the builder and executor
    """
    max_steps: int = Field(default_factory=_env_max_steps, ge=1)
    timeout: Optional[float] = Field(default_factory=_env_timeout, gt=0)
    logging: AigraphLoggingConfig = Field(default_factory=AigraphLoggingConfig)

    class Config:
        validate_assignment = True
