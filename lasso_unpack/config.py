"""
Configuration system for lasso-unpack

Provides configuration management with support for files and environment variables.
Includes validation, default value handling, and configuration merging.
"""

import os
import json
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
import logging

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_NAME = "lasso-stats.json"

__all__ = [
    "ConfigurationError",
    "ConfigurationManager",
    "ExtractionConfig",
    "OutputConfig",
    "UnpackConfig",
    "load_config",
]


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigurationManager:
    """Manages configuration loading, validation, and merging."""

    DEFAULT_CONFIG_PATHS = [
        "lasso-unpack.json",
        "lasso-unpack.yaml",
        "lasso-unpack.yml",
        ".lasso-unpack.json",
        ".lasso-unpack.yaml",
        ".lasso-unpack.yml",
        os.path.expanduser("~/.lasso-unpack.json"),
        os.path.expanduser("~/.lasso-unpack.yaml"),
    ]

    @staticmethod
    def find_config_file(search_paths: Optional[List[str]] = None) -> Optional[str]:
        """Find the first existing configuration file."""
        paths = search_paths or ConfigurationManager.DEFAULT_CONFIG_PATHS

        for path in paths:
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def load_config_file(config_path: str) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")
        return data

    @staticmethod
    def load_env_config() -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        # Extraction settings
        extraction = {}
        if os.getenv("LASSO_UNPACK_RECEIVER"):
            extraction["receiver"] = os.getenv("LASSO_UNPACK_RECEIVER")

        if os.getenv("LASSO_UNPACK_INCLUDE_CONTENT"):
            extraction["include_content"] = _env_flag(os.getenv("LASSO_UNPACK_INCLUDE_CONTENT"))

        if os.getenv("LASSO_UNPACK_INCLUDE_LOADER"):
            extraction["include_loader"] = _env_flag(os.getenv("LASSO_UNPACK_INCLUDE_LOADER"))

        if extraction:
            config["extraction"] = extraction

        # Output settings
        output = {}
        if os.getenv("LASSO_UNPACK_MANIFEST_NAME"):
            manifest_name = os.getenv("LASSO_UNPACK_MANIFEST_NAME")
            if os.path.basename(manifest_name) == manifest_name:
                output["manifest_name"] = manifest_name
            else:
                logger.warning("Invalid LASSO_UNPACK_MANIFEST_NAME value, using default")

        if os.getenv("LASSO_UNPACK_OUTPUT_DIR"):
            output["output_dir"] = os.getenv("LASSO_UNPACK_OUTPUT_DIR")

        if os.getenv("LASSO_UNPACK_INDENT"):
            try:
                indent = int(os.getenv("LASSO_UNPACK_INDENT"))
                if indent < 0:
                    raise ValueError(indent)
                output["indent"] = indent
            except ValueError:
                logger.warning("Invalid LASSO_UNPACK_INDENT value, using default")

        if output:
            config["output"] = output

        return config

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge multiple configuration dictionaries, with later ones taking precedence."""
        result = {}

        for config in configs:
            if not config:
                continue

            for key, value in config.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = ConfigurationManager.merge_configs(result[key], value)
                else:
                    result[key] = value

        return result

    @staticmethod
    def validate_config(config_data: Dict[str, Any]) -> None:
        """Validate configuration data."""
        # Validate extraction settings
        if "extraction" in config_data:
            extraction = config_data["extraction"]

            receiver = extraction.get("receiver")
            if receiver is not None and (not isinstance(receiver, str) or not receiver.strip()):
                raise ConfigurationError("receiver must be a non-empty string")

            for key in ("include_content", "include_loader"):
                if key in extraction and not isinstance(extraction[key], bool):
                    raise ConfigurationError(f"{key} must be a boolean")

        # Validate output settings
        if "output" in config_data:
            output = config_data["output"]

            if "manifest_name" in output:
                name = output["manifest_name"]
                if not isinstance(name, str) or not name or os.path.basename(name) != name:
                    raise ConfigurationError("manifest_name must be a bare file name")

            if "indent" in output:
                indent = output["indent"]
                if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
                    raise ConfigurationError("indent must be a non-negative integer")

            if "encoding" in output and not isinstance(output["encoding"], str):
                raise ConfigurationError("encoding must be a string")


@dataclass
class ExtractionConfig:
    """Configuration for decoding bundles."""

    receiver: Optional[str] = None  # e.g. "$_mod"; None accepts any receiver
    include_content: bool = True
    include_loader: bool = True


@dataclass
class OutputConfig:
    """Configuration for manifest output."""

    manifest_name: str = DEFAULT_MANIFEST_NAME
    output_dir: Optional[str] = None  # None writes alongside the input file
    indent: int = 2
    encoding: str = "utf-8"


@dataclass
class UnpackConfig:
    """Main configuration class for lasso-unpack."""

    extraction_settings: ExtractionConfig = field(default_factory=ExtractionConfig)
    output_settings: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def default(cls) -> "UnpackConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        use_env: bool = True,
        validate: bool = True,
    ) -> "UnpackConfig":
        """
        Load configuration from multiple sources with precedence:
        1. Default values
        2. Configuration file
        3. Environment variables (if use_env=True)

        Args:
            config_path: Path to configuration file. If None, searches for default files.
            use_env: Whether to load environment variables
            validate: Whether to validate the configuration
        """
        configs_to_merge = []

        # Load from file
        file_config = {}
        if config_path:
            if not os.path.exists(config_path):
                raise ConfigurationError(f"Configuration file not found: {config_path}")
            file_config = ConfigurationManager.load_config_file(config_path)
        else:
            found_config = ConfigurationManager.find_config_file()
            if found_config:
                file_config = ConfigurationManager.load_config_file(found_config)
                logger.info(f"Loaded configuration from: {found_config}")

        configs_to_merge.append(file_config)

        if use_env:
            configs_to_merge.append(ConfigurationManager.load_env_config())

        merged_config = ConfigurationManager.merge_configs(*configs_to_merge)

        if validate:
            ConfigurationManager.validate_config(merged_config)

        extraction_config = ExtractionConfig()
        for key, value in merged_config.get("extraction", {}).items():
            if hasattr(extraction_config, key):
                setattr(extraction_config, key, value)

        output_config = OutputConfig()
        for key, value in merged_config.get("output", {}).items():
            if hasattr(output_config, key):
                setattr(output_config, key, value)

        return cls(extraction_settings=extraction_config, output_settings=output_config)

    @classmethod
    def from_file(cls, config_path: str) -> "UnpackConfig":
        """Load configuration from a JSON or YAML file only."""
        return cls.load(config_path=config_path, use_env=False)

    @classmethod
    def from_env(cls) -> "UnpackConfig":
        """Load configuration from environment variables."""
        return cls.load(config_path=None, use_env=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "extraction": asdict(self.extraction_settings),
            "output": asdict(self.output_settings),
        }

    def to_file(self, config_path: str, format: str = "json") -> None:
        """
        Save configuration to file.

        Args:
            config_path: Path to save configuration
            format: File format ('json' or 'yaml')
        """
        config_data = self.to_dict()

        try:
            with open(config_path, "w", encoding="utf-8") as f:
                if format.lower() == "yaml":
                    yaml.dump(config_data, f, default_flow_style=False, indent=2)
                else:
                    json.dump(config_data, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration file: {e}")

    def validate(self) -> None:
        """Validate the current configuration."""
        ConfigurationManager.validate_config(self.to_dict())

    def get_config_summary(self) -> str:
        """Get a human-readable summary of the configuration."""
        extraction = self.extraction_settings
        output = self.output_settings
        return f"""lasso-unpack Configuration Summary:
Extraction:
  - Receiver: {extraction.receiver or "any"}
  - Include content: {extraction.include_content}
  - Include loader: {extraction.include_loader}

Output:
  - Manifest name: {output.manifest_name}
  - Output directory: {output.output_dir or "alongside input"}
  - Indent: {output.indent}
  - Encoding: {output.encoding}
"""


def load_config(config_path: Optional[str] = None, use_env: bool = True) -> UnpackConfig:
    """
    Load configuration from file and/or environment variables.

    Args:
        config_path: Path to configuration file
        use_env: Whether to load environment variables

    Returns:
        UnpackConfig: Loaded configuration
    """
    return UnpackConfig.load(config_path=config_path, use_env=use_env)
