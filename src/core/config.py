"""Centralized configuration management for the annotation service.

This module provides a single source of truth for all environment-based
configuration. It uses pydantic-settings to:
- Load configuration from .env files
- Validate types and values
- Provide defaults where appropriate
- Support environment variable overrides
"""

from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings


DATASET_FILENAME = "annotation.json.enc"


class Settings(BaseSettings):
    """Global settings for the annotation gateway and CLI."""

    # Encrypted dataset
    annotation_encryption_key: str | None = Field(
        None,
        description="AES-256 key: 32 raw UTF-8 bytes or base64/base64url of 32 bytes",
    )
    annotation_dataset_path: str | None = Field(
        None,
        description="Explicit path to the encrypted dataset (tried first)",
    )
    annotation_search_roots: list[Path] = Field(
        default_factory=lambda: [Path.cwd(), Path.cwd() / "nextjs"],
        description="Directories searched for input/annotation.json.enc",
    )
    annotation_image_id: str = Field(
        "annotation-sample",
        description="Only image id the hit-test endpoint accepts",
    )

    # Canvas geometry of the base sample image
    canvas_width: int = Field(1049, gt=0)
    canvas_height: int = Field(695, gt=0)

    # Gateway network settings
    annotation_gateway_host: str = Field(
        "0.0.0.0",
        description="Gateway bind address",
    )
    annotation_gateway_port: int = Field(
        8000,
        description="Gateway port number",
    )

    # Logging
    annotation_log_level: str = Field(
        "INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    @computed_field
    @property
    def candidate_dataset_paths(self) -> list[Path]:
        """Ordered list of files the loader tries."""
        candidates: list[Path] = []
        if self.annotation_dataset_path:
            candidates.append(Path(self.annotation_dataset_path).expanduser())
        for root in self.annotation_search_roots:
            candidates.append(Path(root) / "input" / DATASET_FILENAME)
        return candidates

    model_config = {
        # Look for .env file in project root (3 levels up from this file)
        "env_file": Path(__file__).parent.parent.parent / ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore unknown environment variables
    }


# Create a singleton instance that will be imported throughout the codebase
settings = Settings()
