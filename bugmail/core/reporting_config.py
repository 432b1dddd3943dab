"""
Reporting Config
================
Reads the YAML file listing namespaces and their reporting routes.

Example:

    namespaces:
      upstream:
        reporting:
          - name: upstream-list
            type: email
            config:
              email: bugs@lists.example.org
              mail_maintainers: true

Every email route is checked when the file is loaded; a bad route stops
the service from starting rather than failing later per message.
"""
import logging
from typing import Any, Dict, Iterator, List, Optional

import yaml
from pydantic import BaseModel, ValidationError

from bugmail.core.constants import EMAIL_TYPE
from bugmail.core.exceptions import ConfigError
from bugmail.models.email_config import EmailConfig

logger = logging.getLogger(__name__)


class ReportingRoute(BaseModel):
    name: str = ""
    type: str
    config: Dict[str, Any] = {}

    def email_config(self) -> Optional[EmailConfig]:
        if self.type != EMAIL_TYPE:
            return None
        try:
            return EmailConfig.model_validate(self.config)
        except ValidationError as e:
            raise ConfigError(f"reporting {self.name!r}: {e}") from e


class Namespace(BaseModel):
    reporting: List[ReportingRoute] = []


class ReportingConfig(BaseModel):
    namespaces: Dict[str, Namespace] = {}

    def email_configs(self) -> Iterator[EmailConfig]:
        for ns in self.namespaces.values():
            for route in ns.reporting:
                cfg = route.email_config()
                if cfg is not None:
                    yield cfg

    def check(self) -> None:
        for name, ns in self.namespaces.items():
            for route in ns.reporting:
                cfg = route.email_config()
                if cfg is None:
                    continue
                try:
                    cfg.check()
                except ConfigError as e:
                    raise ConfigError(f"namespace {name!r} reporting {route.name!r}: {e}") from e


def load_reporting_config(path: str) -> ReportingConfig:
    """Load and check the reporting routes. Raises ConfigError."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"cannot read reporting config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"malformed reporting config {path}: {e}") from e

    try:
        config = ReportingConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid reporting config {path}: {e}") from e
    config.check()
    logger.info("Loaded reporting config %s (%d namespaces)", path, len(config.namespaces))
    return config
