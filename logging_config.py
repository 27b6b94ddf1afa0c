"""
Logging configuration for the delay animator.
"""

import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Setup logging configuration
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)


def setup_logger(name):
    """Setup a logger for a component"""
    return logging.getLogger(name)
