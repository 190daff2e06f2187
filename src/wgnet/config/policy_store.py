"""
Network Configuration Store
Loads and saves wgnet network configurations as YAML documents
"""
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import ValidationError

from wgnet.config.settings import DEFAULT_CONFIG_PATH
from wgnet.core.exceptions import WgnetConfigurationError
from wgnet.core.unified_logger import get_logger
from wgnet.domain.entities.network_policy import NetworkPolicy


logger = get_logger(__name__, "policy_store")

CONFIG_SUFFIXES = (".yml", ".yaml")


class PolicyStore:
    """
    Network configurations kept as `<config_path>/<name>.yml`.

    A name that points at an existing file is used as-is, so configurations
    outside the store directory can be operated on directly.
    """

    def __init__(self, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)

    def path_for(self, name: Union[str, Path]) -> Path:
        """Resolve a configuration name to its file path"""
        direct = Path(name)
        if direct.is_file():
            return direct

        for suffix in CONFIG_SUFFIXES:
            candidate = self.config_path / f"{name}{suffix}"
            if candidate.is_file():
                return candidate

        return self.config_path / f"{name}{CONFIG_SUFFIXES[0]}"

    def exists(self, name: Union[str, Path]) -> bool:
        return self.path_for(name).is_file()

    def load(self, name: Union[str, Path]) -> NetworkPolicy:
        """
        Load a network configuration

        Raises:
            WgnetConfigurationError: missing, unreadable or invalid file
        """
        path = self.path_for(name)
        if not path.is_file():
            raise WgnetConfigurationError(
                f"Network configuration '{name}' does not exist ({path})",
                operation="load"
            )

        logger.debug(f"Loading network configuration {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise WgnetConfigurationError(f"YAML parsing error in {path}: {e}", operation="load")
        except OSError as e:
            raise WgnetConfigurationError(f"Cannot read {path}: {e}", operation="load")

        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise WgnetConfigurationError(
                f"{path} must contain a mapping, got {type(document).__name__}",
                operation="load"
            )

        try:
            return NetworkPolicy.from_dict(document)
        except ValidationError as e:
            raise WgnetConfigurationError(f"Invalid network configuration {path}: {e}", operation="load")
        except (AttributeError, TypeError) as e:
            raise WgnetConfigurationError(f"Malformed network configuration {path}: {e}", operation="load")

    def read_text(self, name: Union[str, Path]) -> str:
        """Raw file content, for display"""
        path = self.path_for(name)
        if not path.is_file():
            raise WgnetConfigurationError(
                f"Network configuration '{name}' does not exist ({path})",
                operation="show"
            )
        return path.read_text(encoding='utf-8')

    def save(self, name: Union[str, Path], policy: NetworkPolicy) -> Path:
        """Write a configuration, replacing any existing file"""
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(policy.to_dict(), f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved network configuration {path}")
        return path

    def remove(self, name: Union[str, Path]) -> bool:
        path = self.path_for(name)
        if not path.is_file():
            return False
        path.unlink()
        logger.debug(f"Removed network configuration {path}")
        return True

    def create_default(self, name: str, interface_name: Optional[str] = None,
                       force: bool = False) -> NetworkPolicy:
        """
        Write a default configuration for `name`.

        Raises:
            WgnetConfigurationError: the file exists and force is not set, or
                no valid interface name can be derived from `name`
        """
        if self.exists(name) and not force:
            raise WgnetConfigurationError(
                f"Network configuration '{name}' exists ({self.path_for(name)}), use --force to overwrite",
                operation="new"
            )

        policy = default_policy(interface_name or Path(name).stem)
        if force:
            self.remove(name)
        self.save(name, policy)
        return policy

    def list_configs(self) -> List[Path]:
        """All configuration files in the store directory"""
        if not self.config_path.is_dir():
            return []
        return sorted(
            path for path in self.config_path.iterdir()
            if path.is_file() and path.suffix in CONFIG_SUFFIXES
        )


def default_policy(interface_name: str) -> NetworkPolicy:
    """
    Policy written by `wgnet new`: nothing routed, no NAT, no exceptions

    Raises:
        WgnetConfigurationError: interface_name is not a valid interface name
    """
    try:
        return NetworkPolicy(interface_name=interface_name)
    except ValidationError as e:
        raise WgnetConfigurationError(
            f"Cannot derive an interface name from '{interface_name}': {e.errors()[0]['msg']}",
            operation="new"
        )
