"""
Ethereum network classification.
"""

from keymesh_proxy.core.config import settings


def is_private_network(network_id: int) -> bool:
    """Return True when network_id is not one of the known public networks."""
    return network_id not in settings.PUBLIC_NETWORK_IDS
