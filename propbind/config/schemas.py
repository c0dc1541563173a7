"""Configuration schemas for propbind itself."""

from __future__ import annotations

import codecs

from pydantic import BaseModel, Field, field_validator


class ResourcesConfig(BaseModel):
    """Where configuration resources are looked up and how they are decoded."""

    search_paths: list[str] = Field(default_factory=lambda: ["."])
    encoding: str = "utf-8"

    @field_validator("search_paths", mode="before")
    @classmethod
    def _split_path_list(cls, value):
        # env overrides arrive as "a:b" or "a,b"
        if isinstance(value, str):
            separator = "," if "," in value else ":"
            return [part for part in value.split(separator) if part]
        return value

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {value}") from exc
        return value


class PlaceholderConfig(BaseModel):
    """Lookup sources for ``${NAME}`` tokens in resource paths."""

    use_environment: bool = True


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "WARNING"
    format: str = "text"
    file_path: str | None = None
    max_file_size_mb: int = 10
    backup_count: int = 3
    include_timestamps: bool = True

    @field_validator("format")
    @classmethod
    def _normalize_format(cls, value: str) -> str:
        if not isinstance(value, str):
            return value  # type: ignore[return-value]
        lowered = value.lower()
        if lowered in {"pretty", "text", "plain"}:
            return "text"
        if lowered in {"json", "structured"}:
            return "json"
        return value

    @field_validator("level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value


class PropBindConfig(BaseModel):
    """Root configuration model."""

    resources: ResourcesConfig = Field(default_factory=ResourcesConfig)
    placeholders: PlaceholderConfig = Field(default_factory=PlaceholderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


__all__ = ["LoggingConfig", "PlaceholderConfig", "PropBindConfig", "ResourcesConfig"]
