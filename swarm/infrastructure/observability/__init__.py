from .logging import AgentLogger, setup_logging

__all__ = ["AgentLogger", "setup_logging"]
