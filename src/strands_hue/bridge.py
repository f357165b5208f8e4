"""
Hue Bridge client.

Thin wrapper over ``phue.Bridge.request`` for the v1 REST API. It reads light
state and sends state mutations, returning the bridge's acknowledgement list
untouched so callers can inspect per-attribute results.

Requires:
    pip install strands-hue

Environment variables:
    HUE_BRIDGE_IP: IP address of your Hue Bridge
    HUE_API_KEY: Whitelisted bridge username (API key)
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

ALL_LIGHTS_GROUP = 0

# Lazy import for phue
_phue = None


class BridgeError(RuntimeError):
    """The bridge answered, but reported one or more errors."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        super().__init__(f"Hue API error: {json.dumps(errors)}")


def _get_phue():
    global _phue
    if _phue is None:
        try:
            import phue
            _phue = phue
        except ImportError:
            raise ImportError("phue not installed. Run: pip install strands-hue") from None
    return _phue


def error_entries(response: Any) -> List[Dict[str, Any]]:
    """Return the entries of a bridge response that carry an ``error`` marker."""
    if not isinstance(response, list):
        return []
    return [item for item in response if isinstance(item, dict) and item.get("error")]


class BridgeClient:
    """Request/response access to one bridge, keyed by IP and API key."""

    def __init__(self, bridge_ip: str, api_key: str, bridge: Any = None):
        self.bridge_ip = bridge_ip
        self.api_key = api_key
        if bridge is None:
            # phue skips the link-button handshake when a username is given
            bridge = _get_phue().Bridge(bridge_ip, username=api_key)
        self._bridge = bridge

    @staticmethod
    def settings(bridge_ip: Optional[str] = None, api_key: Optional[str] = None) -> Tuple[str, str]:
        """Bridge IP and API key from the arguments, else the environment."""
        bridge_ip = bridge_ip or os.environ.get("HUE_BRIDGE_IP")
        api_key = api_key or os.environ.get("HUE_API_KEY")

        if not bridge_ip:
            raise ValueError("bridge_ip required. Set HUE_BRIDGE_IP env var or provide bridge_ip parameter")
        if not api_key:
            raise ValueError("api_key required. Set HUE_API_KEY env var or provide api_key parameter")

        return bridge_ip, api_key

    @classmethod
    def from_env(cls, bridge_ip: Optional[str] = None, api_key: Optional[str] = None) -> "BridgeClient":
        return cls(*cls.settings(bridge_ip, api_key))

    def _path(self, *parts: Any) -> str:
        return "/".join(["/api", self.api_key, *[str(p) for p in parts]])

    def _request(self, method: str, address: str, data: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug("%s %s %s", method, address, data if data is not None else "")
        return self._bridge.request(method, address, data)

    def _read(self, address: str) -> Any:
        response = self._request("GET", address)
        errors = error_entries(response)
        if errors:
            raise BridgeError(errors)
        return response

    def read_all(self) -> Dict[str, Dict[str, Any]]:
        """All lights, keyed by bridge light id."""
        return self._read(self._path("lights")) or {}

    def read(self, light_id: str) -> Dict[str, Any]:
        """Full state of one light."""
        return self._read(self._path("lights", light_id))

    def mutate_light(self, light_id: str, attributes: Dict[str, Any]) -> List[Dict[str, Any]]:
        """PUT a state change to one light; returns the acknowledgement list."""
        return self._request("PUT", self._path("lights", light_id, "state"), attributes)

    def mutate_all(self, attributes: Dict[str, Any]) -> List[Dict[str, Any]]:
        """PUT a state change to group 0 (every light on the bridge)."""
        return self._request("PUT", self._path("groups", ALL_LIGHTS_GROUP, "action"), attributes)
