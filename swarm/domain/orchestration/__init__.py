from .core import RunOptions, RunState, Swarm

__all__ = ["RunOptions", "RunState", "Swarm"]
