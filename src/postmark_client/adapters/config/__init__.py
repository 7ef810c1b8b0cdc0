"""Configuration adapter - layered loading, display, and overrides.

Contents:
    * :mod:`.loader` - Layered configuration loading and the ``[postmark]`` bridge
    * :mod:`.display` - Configuration display in human/JSON formats
    * :mod:`.overrides` - CLI ``--set`` override parsing and application
"""

from __future__ import annotations

from .display import display_config
from .loader import get_config, get_default_config_path, load_client_config_from_dict
from .overrides import apply_overrides

__all__ = [
    "apply_overrides",
    "display_config",
    "get_config",
    "get_default_config_path",
    "load_client_config_from_dict",
]
