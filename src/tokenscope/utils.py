"""Utility functions for tokenscope"""

import logging
import os


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

TRUE_VALUES = frozenset({'true', 'yes', 'on', '1'})
FALSE_VALUES = frozenset({'false', 'no', 'off', '0'})


def get_int_env(key: str, default: int = 0) -> int:
    """Get integer value from environment variable, return default if not set or invalid."""
    val = os.getenv(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        logger.warning(f'Invalid value for {key}: {val!r}, using default {default}')
        return default


def get_str_env(key: str, default: str) -> str:
    """
    Get string from environment variable, return default if not set.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        String value or default
    """
    return os.getenv(key, default)


def get_bool_env(key: str, default: bool) -> bool:
    """Get a flag from the environment (true/yes/on/1 or false/no/off/0, any case).

    Unrecognized values fall back to default with a warning.
    """
    val = os.getenv(key)
    if val is None:
        return default
    flag = val.strip().lower()
    if flag in TRUE_VALUES:
        return True
    if flag in FALSE_VALUES:
        return False
    logger.warning(f'Invalid value for {key}: {val!r}, using default {default}')
    return default


def get_color_default(is_tty: bool) -> bool:
    """Whether CLI output is colored when neither --color nor --no-color is given (TOKENSCOPE_COLOR)."""
    return get_bool_env('TOKENSCOPE_COLOR', is_tty)


def get_long_line_threshold() -> int:
    """Character count above which a line is reported as long (TOKENSCOPE_LONG_LINE_THRESHOLD)."""
    value = get_int_env('TOKENSCOPE_LONG_LINE_THRESHOLD', 120)
    if value <= 0:
        logger.warning(f'TOKENSCOPE_LONG_LINE_THRESHOLD must be positive, got {value}, using 120')
        return 120
    return value


def get_heatmap_block_size() -> int:
    """Number of lines per density heatmap block (TOKENSCOPE_HEATMAP_BLOCK_SIZE)."""
    value = get_int_env('TOKENSCOPE_HEATMAP_BLOCK_SIZE', 50)
    if value <= 0:
        logger.warning(f'TOKENSCOPE_HEATMAP_BLOCK_SIZE must be positive, got {value}, using 50')
        return 50
    return value


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging from TOKENSCOPE_LOG_LEVEL.

    Args:
        verbose: Force DEBUG level regardless of the environment.
    """
    if verbose:
        log_level = logging.DEBUG
    else:
        log_level_name = get_str_env('TOKENSCOPE_LOG_LEVEL', 'WARNING').upper()
        log_level = getattr(logging, log_level_name, logging.WARNING)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)


def estimate_tokens(text: str) -> int:
    """Rough token estimate using the 4-chars-per-token heuristic."""
    return (len(text) + 3) // 4


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len characters, appending '...' when cut."""
    if len(text) <= max_len:
        return text
    return text[:max_len] + '...'


def format_number(n: int) -> str:
    """Format an integer with comma thousands separators."""
    return f'{n:,}'


def group_digits(digits: str) -> str:
    """Insert commas into a digit string in groups of three from the right."""
    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    for i in range(head, len(digits), 3):
        groups.append(digits[i : i + 3])
    return ','.join(groups)
