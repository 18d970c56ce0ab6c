"""
Network configuration for the SCM client.

Bundled network presets live in ``networks.json`` next to this module. A preset
is turned into a :class:`NetworkSettings` instance, which is what the chain
client is constructed with.
"""
import json
import logging
import urllib.parse
import importlib.resources
from typing import Dict, Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError

DEFAULT_NETWORK = "rinkeby"
DEFAULT_INVEST_GAS_LIMIT = 90_000

logger = logging.getLogger(__name__)


class NetworkSettings(BaseModel):
    """Everything needed to talk to one deployment of the ICO contracts"""
    name: str
    chain_id: int = Field(..., alias="chainId")
    rpc_url: Optional[str] = Field(None, alias="rpc")
    weth_address: Optional[str] = Field(None, alias="weth")
    scm_address: Optional[str] = Field(None, alias="scm")
    ico_address: Optional[str] = Field(None, alias="ico")
    invest_gas_limit: int = Field(DEFAULT_INVEST_GAS_LIMIT, alias="investGasLimit", gt=0)
    request_timeout: int = Field(30, alias="requestTimeout", gt=0)
    receipt_timeout: float = Field(120, alias="receiptTimeout", gt=0)
    poll_latency: float = Field(0.1, alias="pollLatency", gt=0)

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, url: Optional[str]) -> Optional[str]:
        if url is None:
            return url
        parsed = urllib.parse.urlparse(url)
        # Check if it's a localhost or 127.0.0.1 address (with or without port)
        host = parsed.hostname or ''
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme == 'https' or (parsed.scheme == 'http' and is_local):
            return url
        raise ValueError(f"rpc_url must use https:// unless it points at localhost (got: {url})")


class NetworkConfig:
    """Loader for the bundled network presets"""

    @staticmethod
    def load_networks() -> Dict[str, Dict[str, Any]]:
        """
        Read all network presets from ``networks.json``

        Returns:
            Mapping of network name to its raw preset

        Raises:
            ConfigError: If the file is missing or not valid JSON
        """
        try:
            resource = importlib.resources.files("scm_client").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load network presets: {e}") from e

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ConfigError(f"Network '{network}' not found. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_settings(cls, network: str = DEFAULT_NETWORK, **overrides: Any) -> NetworkSettings:
        """
        Build validated settings for a network preset

        Args:
            network: Name of the preset in ``networks.json``
            **overrides: Field values replacing the preset's; ``None`` values are ignored

        Returns:
            Frozen NetworkSettings

        Raises:
            ConfigError: If the network is unknown, a value is invalid,
                or no RPC endpoint is known for the network
        """
        # Presets use the JSON aliases; overrides use field names
        aliases = {field.alias or name: name for name, field in NetworkSettings.model_fields.items()}
        data = {aliases.get(key, key): value for key, value in cls.get_network(network).items()}
        data["name"] = network
        data.update({key: value for key, value in overrides.items() if value is not None})

        try:
            settings = NetworkSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings for network '{network}': {e}") from e

        if not settings.rpc_url:
            raise ConfigError(
                f"No RPC endpoint configured for network '{network}'; pass --rpc-url or set SCM_RPC_URL"
            )

        logger.debug(f"Using network {network} (chain id {settings.chain_id}) at {settings.rpc_url}")
        return settings
