"""
Reputation weights.

    gamma              uncertainty → reputation factor (T = b + γ·u)
    rho1, rho2         integration weights (interaction frequency, trajectory similarity)
    zeta, sigma        recency weights (recent, past)
    theta, tau         positive / negative decay factors
    psi1, psi2, psi3   trajectory axis weights (speed, location, direction)
    t_recent           recency threshold, logical seconds

Intended: rho1 + rho2 <= 1, zeta + sigma = 1, psi1 + psi2 + psi3 = 1.
The engine does not enforce these; load_config() warns when they fail.
"""

from __future__ import annotations

import json
import logging
import math
import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TRAJTRUST_CONFIG"
SUM_TOLERANCE = 1e-9


class ReputationConfig(BaseModel):
    """Read-only scalar weights shared by every manager in a process."""

    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)

    gamma: float = Field(default=0.5, ge=0.0)
    rho1: float = Field(default=0.5, ge=0.0)
    rho2: float = Field(default=0.5, ge=0.0)
    zeta: float = Field(default=0.7, ge=0.0)
    sigma: float = Field(default=0.3, ge=0.0)
    theta: float = Field(default=1.0, ge=0.0)
    tau: float = Field(default=1.0, ge=0.0)
    psi1: float = Field(default=0.4, ge=0.0)
    psi2: float = Field(default=0.4, ge=0.0)
    psi3: float = Field(default=0.2, ge=0.0)
    t_recent: float = Field(default=10.0, ge=0.0)

    @property
    def rho3(self) -> float:
        """Integration mass reserved for a signal not yet wired in."""
        return 1.0 - self.rho1 - self.rho2

    def weight_warnings(self) -> list[str]:
        """Human-readable list of violated weight-sum intents."""
        warnings = []
        if self.rho1 + self.rho2 > 1.0 + SUM_TOLERANCE:
            warnings.append(f"rho1 + rho2 = {self.rho1 + self.rho2:.4f} exceeds 1")
        if not math.isclose(self.zeta + self.sigma, 1.0, abs_tol=SUM_TOLERANCE):
            warnings.append(f"zeta + sigma = {self.zeta + self.sigma:.4f}, expected 1")
        psi = self.psi1 + self.psi2 + self.psi3
        if not math.isclose(psi, 1.0, abs_tol=SUM_TOLERANCE):
            warnings.append(f"psi1 + psi2 + psi3 = {psi:.4f}, expected 1")
        return warnings


DEFAULT_CONFIG = ReputationConfig()


def config_from_dict(data: dict[str, Any], **overrides: Any) -> ReputationConfig:
    """Build a validated config; ConfigError on bad values."""
    merged = {**data, **{k: v for k, v in overrides.items() if v is not None}}
    try:
        cfg = ReputationConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"invalid reputation config: {e}") from e
    for warning in cfg.weight_warnings():
        logger.warning("config weight check: %s", warning)
    return cfg


def load_config(path: Optional[str] = None, **overrides: Any) -> ReputationConfig:
    """
    Load a JSON config file.

    Falls back to $TRAJTRUST_CONFIG when no path is given and to the
    built-in defaults when neither is set. Keyword overrides win over the
    file (None values are ignored).
    """
    path = path or os.environ.get(CONFIG_ENV_VAR, "")
    if not path:
        return config_from_dict({}, **overrides)

    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"config file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must hold a JSON object")

    logger.debug("loaded reputation config from %s", path)
    return config_from_dict(data, **overrides)
