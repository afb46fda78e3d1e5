# utils.py
"""
Utility functions for the simulation framework.

This module provides logging setup and configuration loading, used by the
entry point but not by the simulation kernel itself.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" key holding
#       "level", "format", and "log_file" sub-keys.
#   - Side Effects: Configures the root Python logger with a console
#     handler and, unless "log_file" is empty, a rotating file handler
#     (creating its directory).
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: the parsed JSON document.
#   - Raises: FileNotFoundError, json.JSONDecodeError (logged first).
#
# get_section(config, name, defaults) -> Dict[str, Any]:
#   - Outputs: `defaults` overlaid with config[name]; keys not present in
#     `defaults` are dropped with a warning.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/drift.log'


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to the console and, if a log file is configured,
    to a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates when the log reaches 1MB, keeps 5 backup logs.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path or '(console only)'}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise


def get_section(config: Dict[str, Any], name: str, defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Returns one config section merged over its defaults."""
    section = dict(defaults)
    for key, value in config.get(name, {}).items():
        if key not in defaults:
            logging.warning(f"Ignoring unknown key '{key}' in config section '{name}'.")
            continue
        section[key] = value
    return section
