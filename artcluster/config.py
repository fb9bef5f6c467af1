"""
Configuration for clustering runs.

A run is described by the algorithm name, whether the vectorized engine is
used, the number of training epochs and a flat mapping of engine
parameters. Configurations are stored as YAML and can be overridden from
the environment.
"""

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .core.errors import ARTError, ConfigurationError
from .core.parameters import (
    ARTParameters,
    EllipsoidParameters,
    FusionParameters,
    FuzzyParameters,
    HypersphereParameters,
)
from .engine.algorithms import ALGORITHMS, create_engine
from .engine.base import BaseART
from .utils.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = ".artcluster.yml"

PARAMETER_TYPES: Dict[str, Type[ARTParameters]] = {
    "fuzzy": FuzzyParameters,
    "hypersphere": HypersphereParameters,
    "ellipsoid": EllipsoidParameters,
    "fusion": FusionParameters,
}

# Fields without usable defaults, filled in by ``ClusteringConfig.template``
TEMPLATE_PARAMETERS: Dict[str, Dict[str, Any]] = {
    "fusion": {"channel_dims": [1, 1], "channel_weights": [0.5, 0.5]},
}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


@dataclass
class ClusteringConfig:
    """
    Configuration for one clustering run.

    ``parameters`` holds keyword arguments for the parameter dataclass of
    ``algorithm``; omitted fields take their defaults.
    """

    algorithm: str = "fuzzy"
    vectorized: bool = False
    epochs: int = 1
    parameters: Dict[str, Any] = field(default_factory=lambda: {
        "vigilance": 0.75,
        "learning_rate": 1.0,
    })

    def __post_init__(self):
        """Validate configuration parameters."""
        self.algorithm = str(self.algorithm).lower()
        if self.algorithm not in ALGORITHMS:
            raise ConfigurationError(
                f"Unknown algorithm '{self.algorithm}', expected one of {sorted(ALGORITHMS)}",
                source="algorithm",
            )
        if self.epochs < 1:
            raise ConfigurationError(f"epochs must be at least 1, got {self.epochs}", source="epochs")
        if not isinstance(self.parameters, dict):
            raise ConfigurationError("parameters must be a mapping", source="parameters")

    @classmethod
    def template(cls, algorithm: str = "fuzzy") -> "ClusteringConfig":
        """Default configuration for ``algorithm`` that builds without edits."""
        config = cls(algorithm=algorithm)
        config.parameters.update(TEMPLATE_PARAMETERS.get(config.algorithm, {}))
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "algorithm": self.algorithm,
            "vectorized": self.vectorized,
            "epochs": self.epochs,
            "parameters": dict(self.parameters),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClusteringConfig":
        """Create from dictionary representation."""
        try:
            epochs = int(data.get("epochs", 1))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"epochs must be an integer, got {data.get('epochs')!r}", source="epochs"
            ) from e
        parameters = data.get("parameters") or {}
        if not isinstance(parameters, dict):
            raise ConfigurationError("parameters must be a mapping", source="parameters")
        return cls(
            algorithm=data.get("algorithm", "fuzzy"),
            vectorized=bool(data.get("vectorized", False)),
            epochs=epochs,
            parameters=dict(parameters),
        )

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        file_path = Path(file_path)

        # Create directory if it doesn't exist
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> "ClusteringConfig":
        """Load configuration from YAML file."""
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(file_path, "r") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {file_path}: {e}", source=str(file_path)) from e

        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping in {file_path}", source=str(file_path)
            )
        return cls.from_dict(data or {})

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        # Look for config in current directory, then home directory
        current_dir_config = Path(DEFAULT_CONFIG_FILE)
        if current_dir_config.exists():
            return current_dir_config
        return Path.home() / DEFAULT_CONFIG_FILE

    @classmethod
    def load_or_default(
        cls, config_path: Optional[Union[str, Path]] = None
    ) -> "ClusteringConfig":
        """
        Load configuration from file or return default if not found.

        Args:
            config_path: Optional path to configuration file

        Returns:
            ClusteringConfig instance
        """
        if config_path:
            config_path = Path(config_path)
            if config_path.exists():
                return cls.load_from_file(config_path)
        else:
            default_path = cls.get_default_config_path()
            if default_path.exists():
                return cls.load_from_file(default_path)

        return cls()


def build_parameters(config: ClusteringConfig) -> ARTParameters:
    """Instantiate the parameter dataclass named by ``config.algorithm``."""
    return PARAMETER_TYPES[config.algorithm].from_dict(config.parameters)


def build_engine(config: ClusteringConfig) -> BaseART:
    """Create an empty engine for ``config``."""
    return create_engine(config.algorithm, vectorized=config.vectorized)


class ConfigManager:
    """
    Manager for clustering configuration.

    Resolution order: the file named by ``ARTCLUSTER_CONFIG``, the explicit
    path, then the default locations. Environment overrides are applied on
    top of whichever file was found.
    """

    ENV_MAPPINGS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
        "ARTCLUSTER_ALGORITHM": ("algorithm", str),
        "ARTCLUSTER_VIGILANCE": ("parameters.vigilance", float),
        "ARTCLUSTER_LEARNING_RATE": ("parameters.learning_rate", float),
        "ARTCLUSTER_PARALLELISM": ("parameters.parallelism_level", int),
        "ARTCLUSTER_ENABLE_SIMD": ("parameters.enable_simd", _parse_bool),
    }

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else None
        self.console = Console()
        self._config: Optional[ClusteringConfig] = None

    @property
    def config(self) -> ClusteringConfig:
        """Get the current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.apply_environment_overrides(self.load_config())
        return self._config

    def load_config(self) -> ClusteringConfig:
        """Load configuration from file without environment overrides."""
        env_config_path = os.getenv("ARTCLUSTER_CONFIG")
        if env_config_path:
            config_path = Path(env_config_path)
            if config_path.exists():
                logger.debug(f"Loading config from ARTCLUSTER_CONFIG={config_path}")
                return ClusteringConfig.load_from_file(config_path)

        if self.config_path and self.config_path.exists():
            return ClusteringConfig.load_from_file(self.config_path)

        return ClusteringConfig.load_or_default()

    def save_config(
        self, config: ClusteringConfig, path: Optional[Union[str, Path]] = None
    ) -> Path:
        """Save configuration to file and make it current."""
        save_path = (
            Path(path)
            if path
            else (self.config_path or ClusteringConfig.get_default_config_path())
        )
        config.save_to_file(save_path)
        self._config = config
        return save_path

    def get_environment_overrides(self) -> Dict[str, Any]:
        """Get configuration overrides from environment variables."""
        overrides = {}
        for env_var, (config_key, config_type) in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            try:
                overrides[config_key] = config_type(env_value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid environment variable {env_var}={env_value}: {e}",
                    source=env_var,
                ) from e
        return overrides

    def apply_environment_overrides(self, config: ClusteringConfig) -> ClusteringConfig:
        """Apply environment variable overrides to configuration."""
        overrides = self.get_environment_overrides()
        if not overrides:
            return config

        config_dict = config.to_dict()
        for key, value in overrides.items():
            if key.startswith("parameters."):
                config_dict["parameters"][key.split(".", 1)[1]] = value
            else:
                config_dict[key] = value
            logger.debug(f"Applied env override: {key}={value}")

        return ClusteringConfig.from_dict(config_dict)

    def validate_config(self, config: ClusteringConfig) -> List[str]:
        """Validate configuration and return list of issues."""
        issues = []

        parameters_type = PARAMETER_TYPES[config.algorithm]
        known = {f.name for f in dataclasses.fields(parameters_type)}
        for key in config.parameters:
            if key not in known:
                issues.append(f"Unknown parameter '{key}' for {config.algorithm}")

        try:
            build_parameters(config)
        except ARTError as e:
            issues.append(e.message)

        return issues

    def display(self, config: Optional[ClusteringConfig] = None):
        """Display configuration in a formatted panel."""
        config = config or self.config

        yaml_str = yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False)
        syntax = Syntax(yaml_str, "yaml", theme="monokai", line_numbers=True)
        panel = Panel(
            syntax,
            title="[bold cyan]Clustering Configuration[/bold cyan]",
            border_style="cyan",
        )
        self.console.print(panel)
