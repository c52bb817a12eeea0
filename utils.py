# utils.py
"""
Utility functions for the simulation framework.

This module provides the logging setup and configuration loading shared by
the host application. Neither belongs to the physics engine itself.
"""
import logging
import logging.handlers
import json
import os
from typing import Any, Dict

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: The full configuration dictionary. Its optional "logging"
#       section may contain "level", "format" and "log_file".
#   - Outputs: None
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and a rotating file handler. Creates the log directory.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Inputs: Path to a JSON file.
#   - Outputs: The parsed dictionary, with every known section present
#     (missing sections become empty dicts).
#   - Side Effects: Logs and re-raises FileNotFoundError / JSONDecodeError.
#     Raises ValueError if the top level is not a JSON object.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/particle_simulator.log'
LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 5
CONFIG_SECTIONS = ('logging', 'simulation_parameters', 'run_control', 'visualization')


def _rotating_file_handler(path: str) -> logging.Handler:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return logging.handlers.RotatingFileHandler(path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS)


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Points the root logger at the console and, unless "log_file" is empty,
    a rotating log file. Handlers from earlier calls are dropped.
    """
    options = config.get('logging', {})
    level = str(options.get('level', 'INFO')).upper()
    log_file = options.get('log_file', DEFAULT_LOG_FILE)

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(_rotating_file_handler(log_file))

    formatter = logging.Formatter(options.get('format', DEFAULT_LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.info(f"Logging to console{' and ' + log_file if log_file else ''} at level {level}.")


def load_config(path: str) -> Dict[str, Any]:
    """Loads the JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        raise ValueError(f"Configuration in {path} must be a JSON object.")

    for section in CONFIG_SECTIONS:
        config.setdefault(section, {})
    logging.info("Configuration loaded successfully.")
    return config
