"""
Configuration file support for the htseq-filter CLI.

Supports YAML and JSON config files with CLI argument override.

Example config (filters.yaml):

    min_count: 10
    max_zerocount: 2
    filter_identical: true
    metacount_file: metacounts.tsv
    summary: true
"""

import json
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from htseqfilter.errors import ConfigError

# config key -> argparse destination
CONFIG_KEYS = {
    'min_count': 'min_count',
    'max_zerocount': 'max_zerocount',
    'filter_identical': 'filter_identical',
    'min_expressed': 'min_expressed',
    'expression_threshold': 'expression_threshold',
    'metacount_file': 'metacount_path',
    'summary': 'summary',
}

# short option -> argparse destination
SHORT_OPTIONS = {
    'm': 'min_count',
    'z': 'max_zerocount',
    'i': 'filter_identical',
    'e': 'min_expressed',
    'x': 'expression_threshold',
    'o': 'metacount_path',
    's': 'summary',
    'c': 'config',
    'v': 'verbose',
}

# long option -> argparse destination, where the two differ
LONG_OPTIONS = {
    'expression': 'expression_threshold',
    'metacount_file': 'metacount_path',
    'output_metacounts': 'metacount_path',
}

_VALUE_OPTIONS = {'m', 'z', 'e', 'x', 'o', 'c'}


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters:
        config_path: Path to config file (.yaml, .yml, or .json)

    Returns:
        Dictionary with configuration values

    Raises:
        ConfigError: If the file is missing, unreadable, of an unsupported
            format or not a mapping

    Examples:
        >>> config = load_config(Path("filters.yaml"))  # doctest: +SKIP
        >>> print(config["min_count"])  # doctest: +SKIP
        10
    """
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()
    if suffix not in ('.yaml', '.yml', '.json'):
        raise ConfigError(
            f"Unsupported config format: {suffix}. "
            f"Use .yaml, .yml, or .json"
        )

    try:
        with open(config_path, 'r') as f:
            if suffix == '.json':
                config = json.load(f)
            else:
                config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file {config_path}: {e}") from e

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ConfigError("Config file must contain a dictionary/mapping at top level")

    return config


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration keys and values.

    Parameters:
        config: Configuration dictionary

    Raises:
        ConfigError: If configuration is invalid
    """
    unknown = sorted(set(config) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigError(
            f"Unknown config keys: {', '.join(unknown)}. "
            f"Valid keys: {', '.join(CONFIG_KEYS)}"
        )

    for key in ('min_count', 'expression_threshold'):
        value = config.get(key)
        if value is not None and (not _is_number(value) or value < 0):
            raise ConfigError(f"{key} must be a non-negative number, got: {value!r}")

    for key in ('max_zerocount', 'min_expressed'):
        value = config.get(key)
        if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
            raise ConfigError(f"{key} must be a non-negative integer, got: {value!r}")

    for key in ('filter_identical', 'summary'):
        value = config.get(key)
        if value is not None and not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false, got: {value!r}")

    value = config.get('metacount_file')
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"metacount_file must be a path string, got: {value!r}")


def _merge_value(cli_value: Any, config_value: Any, was_explicitly_set: bool) -> Any:
    """
    Merge a single config value with CLI argument.

    Rules:
    - CLI args ALWAYS override config if explicitly set
    - If CLI arg not set, use config value
    - If neither set, keep CLI default
    """
    if was_explicitly_set:
        return cli_value

    if config_value is not None:
        return config_value

    return cli_value


def _explicit_destinations(cli_args: List[str]) -> set:
    """Argparse destinations given explicitly on the command line."""
    explicit = set()
    for arg in cli_args:
        if arg == '--':
            break
        if arg.startswith('--'):
            name = arg[2:].split('=', 1)[0].replace('-', '_')
            explicit.add(LONG_OPTIONS.get(name, name))
        elif arg.startswith('-') and len(arg) > 1:
            # Bundled short flags, e.g. -is or -vvm5
            for char in arg[1:]:
                if char in SHORT_OPTIONS:
                    explicit.add(SHORT_OPTIONS[char])
                if char in _VALUE_OPTIONS or char not in SHORT_OPTIONS:
                    break
    return explicit


def merge_config_with_args(config: Dict[str, Any], args: Namespace, cli_args: Optional[List[str]] = None) -> Namespace:
    """
    Merge config file values with CLI arguments.

    Priority (highest to lowest):
    1. Explicitly provided CLI arguments
    2. Config file values
    3. CLI argument defaults

    Parameters:
        config: Configuration dictionary from load_config()
        args: Parsed CLI arguments (argparse.Namespace)
        cli_args: Raw CLI arguments list (for detecting explicit values)
                  If None, assumes all args are defaults

    Returns:
        Updated Namespace with merged values

    Examples:
        >>> from htseqfilter.cli import build_parser
        >>> parser = build_parser()
        >>> config = {'min_count': 10, 'filter_identical': True}
        >>> args = parser.parse_args(["counts.tsv", "-m", "5"])
        >>> merged = merge_config_with_args(config, args, ["counts.tsv", "-m", "5"])
        >>> merged.min_count, merged.filter_identical
        (5.0, True)
    """
    explicit_args = _explicit_destinations(cli_args) if cli_args else set()

    merged = Namespace(**vars(args))

    for config_key, arg_name in CONFIG_KEYS.items():
        if config_key not in config:
            continue
        config_value = config[config_key]
        if config_value is not None and arg_name == 'metacount_path':
            config_value = Path(config_value)

        merged_value = _merge_value(
            getattr(merged, arg_name, None),
            config_value,
            arg_name in explicit_args,
        )
        setattr(merged, arg_name, merged_value)

    return merged
