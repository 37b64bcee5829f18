"""
config_loader.py

Utility for loading structured YAML configuration files used by the audit
pipeline runner and the master orchestrator.
"""
import yaml


def load_config(config_path: str) -> dict:
    """
    Load a YAML configuration file and return the full config.

    Args:
        config_path (str): Path to the YAML config file.

    Returns:
        dict: The full configuration dictionary (empty for an empty file).
    """
    with open(config_path, "r") as f:
        config = yaml.safe_load(f)

    return config or {}


def resolve_module_config(config: dict, module_key: str) -> dict:
    """
    Return the module block whether the full config or the block itself was passed.

    The master runner passes the whole config (``{module_key: {...}}``); notebooks
    usually pass the block directly.
    """
    if module_key in config:
        return config.get(module_key) or {}
    return config
