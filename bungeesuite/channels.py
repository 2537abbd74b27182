"""
Plugin message channel names shared by the proxy and its backend servers.
"""

# Proxy -> server messages.
PROXY_TO_SERVER_CHANNEL = "BungeeSuiteMC"

# Server -> proxy messages.
SERVER_TO_PROXY_CHANNEL = "BungeeSuite"

__all__ = ["PROXY_TO_SERVER_CHANNEL", "SERVER_TO_PROXY_CHANNEL"]
