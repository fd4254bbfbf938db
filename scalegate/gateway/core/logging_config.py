import os

from scalegate.common.core.logging_config import setup_logging as common_setup_logging

DEFAULT_LOG_CONFIG_PATH = "config/gateway_log.yaml"


def setup_logging():
    """
    Load the gateway's YAML logging config (LOG_CONFIG_PATH) and initialize logging.
    """
    config_path = os.getenv("LOG_CONFIG_PATH", DEFAULT_LOG_CONFIG_PATH)
    common_setup_logging(config_path)
