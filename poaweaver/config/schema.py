"""
PoaWeaver v0.1.0

Configuration schema for PoaWeaver.

Defines all available configuration parameters with defaults and validation.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
from typing import Dict, Any, Optional, List
from pathlib import Path
import yaml

from ..poa_core.alignment_engine import (
    INT8_MAX,
    INT8_MIN,
    AlignmentType,
    GapModel,
    ScoringScheme,
    resolve_gap_model,
)


class ConfigValidationError(Exception):
    """Raised when a configuration file cannot be loaded."""
    pass


VALID_MODES = [t.value for t in AlignmentType]
VALID_GAP_MODELS = ['auto'] + [m.value for m in GapModel]
VALID_RESULTS = ['consensus', 'msa', 'both', 'gfa', 'gfa_consensus']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
SCORE_KEYS = ['match', 'mismatch', 'gap_open', 'gap_extend', 'gap_open_2', 'gap_extend_2']


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Alignment
    # ========================================================================
    'alignment': {
        'mode': 'global',  # 'global', 'semi_global', 'local'
        'match': 5,
        'mismatch': -4,
        'gap_open': -8,
        'gap_extend': -6,
        'gap_open_2': -10,
        'gap_extend_2': -4,
        'gap_model': 'auto',  # 'auto', 'linear', 'affine', 'convex'
        'strand_ambiguous': False,  # Also try the reverse complement
    },

    # ========================================================================
    # Input
    # ========================================================================
    'input': {
        'min_length': 0,
        'use_quality_weights': True,  # FASTQ qualities as edge weights
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'result': 'consensus',  # 'consensus', 'msa', 'both', 'gfa', 'gfa_consensus'
        'line_width': 0,  # FASTA line wrapping (0 = off)

        # Logging
        'logging': {
            'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': None,
        },
    },
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config_path does not exist
        ConfigValidationError: If the file is not a valid YAML mapping
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in config file {config_path}: {e}")

        if user_config is None:
            user_config = {}
        if not isinstance(user_config, dict):
            raise ConfigValidationError(
                f"Config file {config_path} must contain a mapping, got {type(user_config).__name__}"
            )

        section_errors = _section_errors(user_config)
        if section_errors:
            raise ConfigValidationError(
                f"Invalid config file {config_path}: {'; '.join(section_errors)}"
            )

        # Deep merge user config into defaults
        config = _deep_merge(config, user_config)

    return config


def _section_errors(config: Dict[str, Any]) -> List[str]:
    """Sections (and the output.logging subsection) that are present but not mappings."""
    errors = []
    for section in ('alignment', 'input', 'output'):
        if section in config and not isinstance(config[section], dict):
            errors.append(f"Section '{section}' must be a mapping, got {config[section]!r}")
    output = config.get('output')
    if isinstance(output, dict) and 'logging' in output and not isinstance(output['logging'], dict):
        errors.append(f"Section 'output.logging' must be a mapping, got {output['logging']!r}")
    return errors


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'dna', 'protein', 'local')
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'dna':
        config['alignment']['strand_ambiguous'] = True

    elif template == 'protein':
        config['alignment']['match'] = 2
        config['alignment']['mismatch'] = -1
        config['alignment']['gap_open'] = -11
        config['alignment']['gap_extend'] = -1
        config['alignment']['gap_model'] = 'affine'
        config['input']['use_quality_weights'] = False

    elif template == 'local':
        config['alignment']['mode'] = 'local'
        config['alignment']['gap_model'] = 'affine'

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = _section_errors(config)
    if errors:
        return errors

    alignment = config.get('alignment', {})

    # Validate alignment mode
    mode = alignment.get('mode')
    if mode not in VALID_MODES:
        errors.append(f"Invalid alignment mode: {mode} (expected one of {', '.join(VALID_MODES)})")

    # Validate scores (signed 8-bit)
    for key in SCORE_KEYS:
        value = alignment.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"alignment.{key} must be an integer, got {value!r}")
        elif not INT8_MIN <= value <= INT8_MAX:
            errors.append(f"alignment.{key} out of range [{INT8_MIN}, {INT8_MAX}]: {value}")

    gap_model = alignment.get('gap_model', 'auto')
    if gap_model not in VALID_GAP_MODELS:
        errors.append(f"Invalid gap model: {gap_model}")

    # Validate output
    result = config.get('output', {}).get('result')
    if result not in VALID_RESULTS:
        errors.append(f"Invalid output result: {result} (expected one of {', '.join(VALID_RESULTS)})")

    line_width = config.get('output', {}).get('line_width', 0)
    if not isinstance(line_width, int) or line_width < 0:
        errors.append(f"output.line_width must be a non-negative integer, got {line_width!r}")

    level = config.get('output', {}).get('logging', {}).get('level', 'INFO')
    if str(level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")

    min_length = config.get('input', {}).get('min_length', 0)
    if not isinstance(min_length, int) or min_length < 0:
        errors.append(f"input.min_length must be a non-negative integer, got {min_length!r}")

    return errors


def scoring_from_config(config: Dict[str, Any]) -> ScoringScheme:
    """
    Build the ScoringScheme described by the 'alignment' section.

    gap_model 'auto' picks the simplest model the gap scores describe.
    """
    alignment = config['alignment']
    scores = {key: alignment[key] for key in SCORE_KEYS}

    gap_model = alignment.get('gap_model', 'auto')
    if gap_model == 'auto':
        model = resolve_gap_model(
            scores['gap_open'], scores['gap_extend'],
            scores['gap_open_2'], scores['gap_extend_2']
        )
    else:
        model = GapModel(gap_model)

    return ScoringScheme(gap_model=model, **scores)
