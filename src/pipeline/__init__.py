"""Discovery pipeline: one background fetch-and-rank cycle per call."""

from src.pipeline.models import CycleResult, CycleStatus
from src.pipeline.pipeline import DiscoveryPipeline, ResultCallback
from src.pipeline.snapshot import LatestResult
from src.pipeline.state_machine import CycleState, CycleStateError, CycleStateMachine


__all__ = [
    "CycleResult",
    "CycleState",
    "CycleStateError",
    "CycleStateMachine",
    "CycleStatus",
    "DiscoveryPipeline",
    "LatestResult",
    "ResultCallback",
]
