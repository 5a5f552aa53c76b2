"""Configuration settings models using Pydantic."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Keys available to indexed menus: 1-9 then A-Z without Q
MAX_PAGE_SIZE = 34


class GitConfig(BaseModel):
    """Configuration for invoking git."""

    executable: str = "git"
    timeout: Optional[float] = Field(default=None, gt=0)

    @field_validator("executable")
    @classmethod
    def validate_executable(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("executable cannot be empty")
        return v.strip()


class GeneratorConfig(BaseModel):
    """Configuration for the AI commit message generator."""

    command: str = "aicommit"
    args: list[str] = Field(default_factory=list)
    stream_delay: float = Field(default=0.0, ge=0.0, le=5.0)
    install_hint: Optional[str] = "https://github.com/stong1994/aicommit"

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("command cannot be empty")
        return v.strip()


class FlowConfig(BaseModel):
    """Configuration for the interactive flow."""

    auto_upstream: bool = False
    offer_init: bool = False
    page_size: int = Field(default=9, ge=1, le=MAX_PAGE_SIZE)
    set_upstream_after_push: bool = True


class UIConfig(BaseModel):
    """Configuration for terminal output."""

    theme: Literal["default", "minimal"] = "default"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="GITWALK_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    git: GitConfig = Field(default_factory=GitConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    flow: FlowConfig = Field(default_factory=FlowConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    log_file: Optional[str] = None

    @field_validator("log_file")
    @classmethod
    def validate_log_file(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty path as no log file."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def resolved_log_file(self) -> Optional[Path]:
        """Get the log file path with ~ expanded."""
        if self.log_file is None:
            return None
        return Path(self.log_file).expanduser()
