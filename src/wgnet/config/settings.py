"""
System Configuration Settings Module
Uses Pydantic for configuration validation and management
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


DEFAULT_CONFIG_PATH = Path("/etc/wgnet")
DEFAULT_WIREGUARD_DIR = Path("/etc/wireguard")


@dataclass(frozen=True)
class RunOptions:
    """Run mode fixed for the lifetime of one invocation"""
    dry_run: bool = False
    verbose: bool = False


class WgnetSettings(BaseSettings):
    """wgnet configuration"""

    # Paths
    config_path: Path = Field(
        default=DEFAULT_CONFIG_PATH,
        description="Directory holding wgnet network configurations"
    )

    wireguard_dir: Path = Field(
        default=DEFAULT_WIREGUARD_DIR,
        description="Directory holding wg-quick interface configurations"
    )

    log_file: Optional[Path] = Field(
        default=None,
        description="Optional file receiving detailed logs"
    )

    # Run mode
    dry_run: bool = Field(
        default=False,
        description="Log state-changing commands instead of executing them"
    )

    verbose: bool = Field(
        default=False,
        description="Log every command and debug output"
    )

    # Network policy
    subnet_prefix: int = Field(
        default=24,
        description="Prefix length of the interface's local subnet"
    )

    # External tools
    iptables_cmd: str = Field(default="iptables", description="iptables executable")
    wg_cmd: str = Field(default="wg", description="wg executable")
    wg_quick_cmd: str = Field(default="wg-quick", description="wg-quick executable")
    ip_cmd: str = Field(default="ip", description="iproute2 executable")

    @field_validator('config_path', 'wireguard_dir')
    @classmethod
    def ensure_absolute_path(cls, v):
        """Ensure path is absolute"""
        if not v.is_absolute():
            v = v.resolve()
        return v

    @field_validator('subnet_prefix')
    @classmethod
    def validate_subnet_prefix(cls, v):
        if not 0 <= v <= 32:
            raise ValueError(f"subnet_prefix must be between 0 and 32, got {v}")
        return v

    def run_options(self) -> RunOptions:
        return RunOptions(dry_run=self.dry_run, verbose=self.verbose)

    model_config = {
        "env_prefix": "WGNET_",
        "case_sensitive": False
    }
