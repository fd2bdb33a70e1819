import os
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator

from swarm.domain.models.agent import DEFAULT_MODEL


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime configuration.

    Run-level keyword arguments passed to ``Swarm.run`` take precedence over
    these values for that run.
    """

    # Completion service
    default_model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: Optional[float] = Field(None, description="Request timeout in seconds")

    # Run loop defaults
    max_turns: Optional[int] = Field(None, ge=0, description="None means unbounded")
    execute_tools: bool = True
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        if value not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json', got {value!r}")
        return value

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        max_turns = os.getenv("SWARM_MAX_TURNS")
        timeout = os.getenv("SWARM_TIMEOUT")
        return cls(
            default_model=os.getenv("SWARM_DEFAULT_MODEL", DEFAULT_MODEL),
            api_key=os.getenv("OPENAI_API_KEY"),
            base_url=os.getenv("OPENAI_BASE_URL"),
            timeout=float(timeout) if timeout else None,
            max_turns=int(max_turns) if max_turns else None,
            execute_tools=_env_bool("SWARM_EXECUTE_TOOLS", True),
            debug=_env_bool("SWARM_DEBUG", False),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "console"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, hiding the API key."""
        data = self.model_dump()
        if data.get("api_key"):
            data["api_key"] = "***"
        return data
