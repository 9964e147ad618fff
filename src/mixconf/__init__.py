# ABOUTME: Package initialization for mixconf configuration and state handling
# ABOUTME: Defines version, public entry points and package-level logging configuration
"""mixconf - versioned builder.conf and mixer.state documents for mix builds"""

__version__ = "0.1.0"

# Set up logging for the package
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from mixconf.config import MixConfig, load_config  # noqa: E402
from mixconf.state import MixState, load_state  # noqa: E402

__all__ = ["MixConfig", "MixState", "load_config", "load_state", "__version__"]
