from .main_agent import RunOptions, RunState, Swarm

__all__ = ["RunOptions", "RunState", "Swarm"]
