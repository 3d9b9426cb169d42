"""Configuration for instruction sync."""
import os
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field, field_validator

# Fixed names from the IDE workspace schema
COMPONENT_NAME = "AIAssistantCustomInstructionsStorage"
INSTRUCTIONS_OPTION = "instructions"
STORED_INSTRUCTION_TAG = "AIAssistantStoredInstruction"
ACTION_ID_OPTION = "actionId"
CONTENT_OPTION = "content"
INSTRUCTION_FILE_SUFFIX = ".md"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

class SyncConfig(BaseModel):
    """Paths and settings for a single project."""
    project_root: Path = Field(
        default_factory=lambda: Path(os.getenv("AI_SYNC_PROJECT_ROOT", os.getcwd()))
    )
    workspace_file: Path = Field(
        default_factory=lambda: Path(os.getenv("AI_SYNC_WORKSPACE_FILE", ".idea/workspace.xml"))
    )
    instructions_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("AI_SYNC_INSTRUCTIONS_DIR", ".ai"))
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("AI_SYNC_LOG_LEVEL", "INFO"), validate_default=True
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {v!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level

    def get_absolute_path(self, path: Union[str, Path]) -> Path:
        """Resolve a path relative to the project root."""
        path = Path(path)
        if path.is_absolute():
            return path
        return self.project_root / path

    def get_workspace_path(self) -> Path:
        """Get the absolute path of the workspace document."""
        return self.get_absolute_path(self.workspace_file)

    def get_instructions_path(self) -> Path:
        """Get the absolute path of the instructions directory."""
        return self.get_absolute_path(self.instructions_dir)

    def for_project(self, project_root: Union[str, Path]) -> "SyncConfig":
        """Return a copy of this config rooted at another project."""
        return self.model_copy(update={"project_root": Path(project_root)})

config = SyncConfig()
