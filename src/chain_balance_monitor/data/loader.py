"""Chain configuration loader."""

from pathlib import Path
from typing import Any

import yaml

from chain_balance_monitor.core.models import ChainDescriptor

DEFAULT_CHAINS_FILE = Path(__file__).parent / "chains.yaml"


class _Placeholders(dict):
    """Leaves unknown ``{name}`` placeholders in place for later substitution."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def load_chain_config(path: Path | str | None = None) -> list[dict[str, Any]]:
    """
    Load raw chain entries from a YAML file.

    Parameters
    ----------
    path : Path | str | None
        YAML file; the packaged chains.yaml when None

    Returns
    -------
    list[dict[str, Any]]
        Chain entries in file order

    Raises
    ------
    ValueError
        If the file is not valid YAML or has no ``chains`` list

    """
    chains_path = Path(path) if path else DEFAULT_CHAINS_FILE
    try:
        with open(chains_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in {chains_path}: {e}"
        raise ValueError(msg) from e

    chains = config.get("chains") if isinstance(config, dict) else None
    if not isinstance(chains, list):
        msg = f"{chains_path} must define a 'chains' list"
        raise ValueError(msg)
    return chains


def load_chains(alchemy_api_key: str = "", path: Path | str | None = None) -> list[ChainDescriptor]:
    """
    Build chain descriptors with API keys substituted into their endpoints.

    Parameters
    ----------
    alchemy_api_key : str
        Key substituted for ``{alchemy_api_key}``
    path : Path | str | None
        YAML file; the packaged chains.yaml when None

    Returns
    -------
    list[ChainDescriptor]
        Descriptors in file order

    """
    secrets = _Placeholders(alchemy_api_key=alchemy_api_key)
    descriptors = []
    for entry in load_chain_config(path):
        fields = dict(entry)
        fields["endpoint_url"] = str(fields.get("endpoint_url", "")).format_map(secrets)
        descriptors.append(ChainDescriptor(**fields))
    return descriptors


def get_all_supported_chains(path: Path | str | None = None) -> list[str]:
    """
    Get chain names in report order.

    Returns
    -------
    list[str]
        List of chain names

    """
    return [entry["name"] for entry in load_chain_config(path)]
