"""Settings file loading."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger
from pydantic import ValidationError

from cluster_health_checks.exceptions import ConfigurationError
from cluster_health_checks.models.report_config import ReportConfig
from cluster_health_checks.models.run_config import RunConfig


class ConfigManager:
    """Manager for loading run defaults and check thresholds from YAML."""

    def __init__(self, yaml_path: Optional[str] = None) -> None:
        """Initialize the config manager.

        Args:
             yaml_path: The path to a health_check.yaml file. If None, uses the packaged default.
        """
        if yaml_path is None:
            yaml_path = Path(__file__).parent / "health_check.yaml"
        else:
            yaml_path = Path(yaml_path)

        self.yaml_path = yaml_path
        self._data = self._load_yaml()

    def _load_yaml(self) -> Dict[str, Dict[str, Any]]:
        """Load and parse the settings file.

        Returns:
            A dictionary with 'defaults' and 'checks' keys.

        Raises:
            ConfigurationError: If the file is missing or malformed.
        """
        if not self.yaml_path.exists():
            raise ConfigurationError(f"Settings file not found: {self.yaml_path}")

        try:
            with open(self.yaml_path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.yaml_path}: {e}") from e

        if not isinstance(data, dict) or "health_check" not in data:
            raise ConfigurationError(
                f"Invalid settings file: missing 'health_check' key in {self.yaml_path}"
            )

        settings = data["health_check"] or {}
        defaults = settings.get("defaults") or {}
        checks = settings.get("checks") or {}
        if not isinstance(defaults, dict) or not isinstance(checks, dict):
            raise ConfigurationError(
                f"Invalid settings: 'defaults' and 'checks' must be mappings in {self.yaml_path}"
            )

        logger.debug(f"[CONFIG] Loaded settings from {self.yaml_path}")
        return {"defaults": defaults, "checks": checks}

    def get_defaults(self) -> Dict[str, Any]:
        """Get the run and report defaults."""
        return dict(self._data["defaults"])

    def get_check_settings(self, check_id: str) -> Dict[str, Any]:
        """Get the thresholds configured for one check.

        Args:
            check_id: The ID of the check (e.g., "node-usage").

        Returns:
            A dictionary of settings, empty when the check has none.
        """
        return dict(self._data["checks"].get(check_id) or {})

    def get_setting(self, check_id: str, key: str, default: Any = None) -> Any:
        return self.get_check_settings(check_id).get(key, default)

    def run_config(self, **overrides: Any) -> RunConfig:
        """Build a RunConfig from the defaults, with non-None overrides applied.

        Raises:
            ConfigurationError: If the merged values are invalid.
        """
        return self._build(RunConfig, overrides)

    def report_config(self, **overrides: Any) -> ReportConfig:
        """Build a ReportConfig from the defaults, with non-None overrides applied.

        Raises:
            ConfigurationError: If the merged values are invalid.
        """
        return self._build(ReportConfig, overrides)

    def _build(self, model, overrides: Dict[str, Any]):
        fields = model.model_fields
        values = {k: v for k, v in self._data["defaults"].items() if k in fields}
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return model(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {model.__name__}: {e}") from e
