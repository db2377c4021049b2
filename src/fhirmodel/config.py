# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Process-wide model policy: auto-creation and enumeration leniency.

The active configuration lives in a context variable. :func:`configure` is the
single initialization point for the process default; :func:`use_config` scopes
a different configuration to one block (readers and validators use it for
their ``config=`` argument).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

_LOG = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class ModelConfigError(Exception):
    """Raised when a model configuration file is invalid or cannot be loaded."""


class ModelConfig(BaseModel):
    """Policy flags applied uniformly to every record type.

    Attributes:
        auto_create: Instantiate a default value when an unset singular field is read.
        error_on_auto_create: Raise instead of auto-creating; takes precedence over ``auto_create``.
        accept_invalid_enums: Map unrecognized enumeration codes to the unrecognized state
            instead of failing the decode.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    auto_create: bool = Field(default=True, alias="auto-create")
    error_on_auto_create: bool = Field(default=False, alias="error-on-auto-create")
    accept_invalid_enums: bool = Field(default=False, alias="accept-invalid-enums")


def current_config() -> ModelConfig:
    """Return the configuration active in the current context."""
    scoped = _ACTIVE.get()
    return scoped if scoped is not None else _default


def configure(config: ModelConfig) -> None:
    """Install *config* as the process-wide default configuration."""
    global _default
    _default = config


@contextmanager
def use_config(config: ModelConfig | None) -> Iterator[ModelConfig]:
    """Activate *config* for the duration of the ``with`` block.

    Passing ``None`` keeps whatever configuration is already active.
    """
    if config is None:
        yield current_config()
        return
    token = _ACTIVE.set(config)
    try:
        yield config
    finally:
        _ACTIVE.reset(token)


def load_model_config(path: Path) -> ModelConfig:
    """Load and validate a model configuration file.

    An empty file yields the default configuration.

    Args:
        path: Path to a YAML file using the dashed keys (``auto-create`` etc.).

    Returns:
        A validated ModelConfig instance.

    Raises:
        ModelConfigError: If the file cannot be read, contains invalid YAML,
            or does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModelConfigError(f"Cannot read model config '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ModelConfigError(f"Invalid YAML in model config '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ModelConfigError(f"{path}: model config must be a YAML mapping")

    try:
        config = ModelConfig.model_validate(data)
    except ValidationError as exc:
        raise ModelConfigError(f"Invalid model config '{path}': {exc}") from exc

    _LOG.debug("Loaded model config from %s: %s", path, config)
    return config


# ################
# Implementation
# ################

_default = ModelConfig()
_ACTIVE: ContextVar[ModelConfig | None] = ContextVar("fhirmodel_config", default=None)
