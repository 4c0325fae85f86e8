"""Pydantic models for config.yaml validation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from foliodash.config.defaults import (
    API_DEFAULTS,
    API_ENDPOINTS,
    ASSET_TYPES,
    BREAKDOWN_KEYS,
    DISPLAY_DEFAULTS,
    QUERY_PARAMS,
    STORAGE_KEYS,
)


# ---------------------------------------------------------------------------
# API Config
# ---------------------------------------------------------------------------

class EndpointsConfig(BaseModel):
    portfolios: str = API_ENDPOINTS["portfolios"]
    summary: str = API_ENDPOINTS["summary"]
    xirr: str = API_ENDPOINTS["xirr"]


class ApiConfig(BaseModel):
    base_url: str = API_DEFAULTS["base_url"]
    access_token: str = ""
    timeout: float = API_DEFAULTS["timeout"]
    endpoints: EndpointsConfig = Field(default_factory=EndpointsConfig)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"API timeout must be positive, got {v}")
        return v


# ---------------------------------------------------------------------------
# Selection Config
# ---------------------------------------------------------------------------

class SelectionConfig(BaseModel):
    asset_types: list[str] = Field(default_factory=lambda: list(ASSET_TYPES))
    breakdown_keys: dict[str, str] = Field(
        default_factory=lambda: dict(BREAKDOWN_KEYS)
    )
    storage_keys: dict[str, str] = Field(
        default_factory=lambda: dict(STORAGE_KEYS)
    )
    query_params: dict[str, str] = Field(
        default_factory=lambda: dict(QUERY_PARAMS)
    )

    @field_validator("storage_keys")
    @classmethod
    def fill_storage_keys(cls, v: dict[str, str]) -> dict[str, str]:
        return {**STORAGE_KEYS, **v}

    @field_validator("query_params")
    @classmethod
    def fill_query_params(cls, v: dict[str, str]) -> dict[str, str]:
        return {**QUERY_PARAMS, **v}

    @model_validator(mode="after")
    def domain_is_valid(self) -> "SelectionConfig":
        if not self.asset_types:
            raise ValueError("selection.asset_types must not be empty")
        if len(set(self.asset_types)) != len(self.asset_types):
            raise ValueError("selection.asset_types contains duplicates")
        explicit = self.breakdown_keys if "breakdown_keys" in self.model_fields_set else {}
        unknown = set(explicit) - set(self.asset_types)
        if unknown:
            raise ValueError(
                f"breakdown_keys maps unknown asset types: {sorted(unknown)}"
            )
        # Overrides layer on the defaults for the configured domain
        defaults = {t: BREAKDOWN_KEYS[t] for t in self.asset_types if t in BREAKDOWN_KEYS}
        self.breakdown_keys = {**defaults, **explicit}
        return self


# ---------------------------------------------------------------------------
# Output Config
# ---------------------------------------------------------------------------

class OutputConfig(BaseModel):
    decimals: int = DISPLAY_DEFAULTS["decimals"]
    placeholder: str = DISPLAY_DEFAULTS["placeholder"]


# ---------------------------------------------------------------------------
# Database Config
# ---------------------------------------------------------------------------

class DatabaseConfig(BaseModel):
    path: str = "~/.foliodash/foliodash.db"


# ---------------------------------------------------------------------------
# Top-Level Config
# ---------------------------------------------------------------------------

class FoliodashConfig(BaseModel):
    """Root configuration model for the Foliodash application."""

    version: int = 1
    api: ApiConfig = Field(default_factory=ApiConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @model_validator(mode="before")
    @classmethod
    def coerce_none_to_defaults(cls, data: Any) -> Any:
        """YAML parses empty keys as None. Drop them so defaults apply."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data
