"""Configuration management for the RWL reader.

This module provides configuration loading from YAML files. Reader options,
format constants and logging settings are centralized here so that the
pipeline stages never hardcode layout numbers.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
import yaml
from dataclasses import dataclass, field


DEFAULT_CONFIG = Path(__file__).parent / "default.yaml"


@dataclass
class ReaderConfig:
    """Options of a single read (the entry-point flags)."""

    round: bool = False
    zero_as_missing: bool = False
    encoding: str = "latin-1"

    @classmethod
    def from_flags(cls, flags: Iterable[str], encoding: str = "latin-1") -> "ReaderConfig":
        """Build options from legacy string flags.

        Args:
            flags: Any of 'round', 'zero' or 'zero-as-missing' (case-insensitive).
                Unknown flags are ignored.
            encoding: Text encoding used to open files.

        Returns:
            ReaderConfig with the requested switches turned on.

        Example:
            >>> ReaderConfig.from_flags(["round", "zero"])
            ReaderConfig(round=True, zero_as_missing=True, encoding='latin-1')
        """
        normalized = {str(f).strip().lower() for f in flags}
        return cls(
            round="round" in normalized,
            zero_as_missing=bool(normalized & {"zero", "zero-as-missing", "zero_as_missing"}),
            encoding=encoding,
        )


@dataclass
class FormatConfig:
    """Fixed-width layout constants of the decadal format.

    Widths and region ends count characters from the start of the line, so
    `data_start` is also the 0-based first value column. Only
    `header_marker_column` is a 1-based column number.
    """

    id_width: int = 8
    data_start: int = 12
    value_region_end: int = 72
    header_marker_column: int = 8
    header_markers: List[str] = field(default_factory=lambda: ["1", "2", "3"])
    field_width: int = 6
    values_per_row: int = 10
    stop_markers: List[int] = field(default_factory=lambda: [999, -9999])
    fill_value: int = 9990
    sentinel_value: int = 999
    sentinel_band: Tuple[float, float] = (900.0, 1100.0)


@dataclass
class PathConfig:
    """Path configuration container."""

    input_dir: Path
    output_dir: Path


@dataclass
class OutputConfig:
    """Output file naming for the batch script."""

    matrix_suffix: str = "_matrix.csv"
    log_suffix: str = "_log.csv"
    float_format: str = "%.3f"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = ""
    console: bool = True


@dataclass
class Settings:
    """Main settings container for the RWL reader.

    Attributes:
        project: Project metadata (name, version, root directory)
        reader: Default reader options
        format: Fixed-width layout constants
        paths: Input and output folders for batch runs
        output: Output file naming
        logging: Logging configuration
    """

    project: Dict[str, Any]
    reader: ReaderConfig
    format: FormatConfig
    paths: PathConfig
    output: OutputConfig
    logging: LoggingConfig

    @classmethod
    def from_yaml(cls, config_path: Optional[str] = None) -> "Settings":
        """Load settings from YAML configuration file.

        Args:
            config_path: Path to YAML configuration file.
                        If None, uses config/config.yaml when present and the
                        packaged default otherwise.

        Returns:
            Settings instance with loaded configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If config file has invalid YAML syntax
            KeyError: If required configuration keys are missing
        """
        if config_path is None:
            possible_paths = [
                Path("config/config.yaml"),
                Path("../config/config.yaml"),
                DEFAULT_CONFIG,
            ]
            config_path = next((p for p in possible_paths if p.exists()), None)

            if config_path is None:
                raise FileNotFoundError(
                    "Could not find config/config.yaml. "
                    "Please create it or specify path explicitly."
                )
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        # Relative paths are resolved against the parent of the config directory,
        # or the working directory for the packaged default
        root_dir = Path(config["project"].get("root_dir", "."))
        if config_path.resolve() == DEFAULT_CONFIG.resolve():
            root_dir = (Path.cwd() / root_dir).resolve()
        elif not root_dir.is_absolute():
            root_dir = (config_path.parent.parent / root_dir).resolve()

        paths_dict = config["paths"]
        path_config = PathConfig(
            input_dir=root_dir / paths_dict["input_dir"],
            output_dir=root_dir / paths_dict["output_dir"],
        )

        format_dict = dict(config.get("format", {}))
        if "sentinel_band" in format_dict:
            format_dict["sentinel_band"] = tuple(format_dict["sentinel_band"])

        return cls(
            project=config["project"],
            reader=ReaderConfig(**config.get("reader", {})),
            format=FormatConfig(**format_dict),
            paths=path_config,
            output=OutputConfig(**config.get("output", {})),
            logging=LoggingConfig(**config.get("logging", {})),
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings(config_path: Optional[str] = None, force_reload: bool = False) -> Settings:
    """Get or create global settings instance.

    Configuration is loaded only once unless explicitly reloaded.

    Args:
        config_path: Path to YAML configuration file. If None, uses default.
        force_reload: If True, reload settings even if already loaded.

    Returns:
        Settings instance with loaded configuration

    Example:
        >>> settings = get_settings()
        >>> settings.format.fill_value
        9990
    """
    global _settings

    if _settings is None or force_reload:
        _settings = Settings.from_yaml(config_path)

    return _settings
