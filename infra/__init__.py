"""Gateway configuration and object-graph bootstrap."""

from .bootstrap import InfraBootstrap
from .config import GatewayConfig, get_config

__all__ = ["GatewayConfig", "InfraBootstrap", "get_config"]
