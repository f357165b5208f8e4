"""
Philips Hue Light Control Tool

Control Philips Hue lights through a bridge: list them, read one, set
brightness, set color and switch power. Targets are a bridge light id or
"all" for every light on the bridge.

Requires:
    pip install strands-hue

Environment variables:
    HUE_BRIDGE_IP: IP address of your Hue Bridge (optional if bridge_ip provided)
    HUE_API_KEY: Bridge API key / username (optional if api_key provided)

Supported actions
-----------------
- list_lights
    Parameters: none
- get_light
    Parameters: light_id (required, not "all")
- set_brightness
    Parameters: light_id (required, id or "all"), brightness (required, 0-254)
- set_color
    Parameters: light_id (required, id or "all"),
                color (required - hex "#FF0000", name "red", or temperature "warm"/"2700K"),
                strict (optional - fail on unknown colors instead of using white)
- toggle_light
    Parameters: light_id (required, id or "all"), on (required, true/false)

Notes:
  - Brightness: 0-254 (0 also turns the light off)
  - Setting a color always turns the light on
  - Color temperature names: warm, soft, neutral, cool, daylight
  - Kelvin values are clamped to 2000K-6500K (500-153 mireds)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

from strands import tool

from strands_hue.bridge import BridgeClient, BridgeError
from strands_hue.colors import describe, resolve
from strands_hue.commands import (
    AllLights,
    apply_state,
    brightness_request,
    color_request,
    list_lights,
    parse_target,
    power_request,
    summarize_light,
)

logger = logging.getLogger(__name__)

_client_cache: Dict[Tuple[str, str], BridgeClient] = {}


def _get_client(bridge_ip: Optional[str] = None, api_key: Optional[str] = None) -> BridgeClient:
    """Get or create a bridge client."""
    key = BridgeClient.settings(bridge_ip, api_key)
    if key in _client_cache:
        return _client_cache[key]

    client = BridgeClient(*key)
    _client_cache[key] = client
    return client


def _ok(**data: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {"success": True}
    out.update(data)
    return out


def _err(message: str, *, error_type: Optional[str] = None, **data: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {"success": False, "error": message}
    if error_type:
        out["error_type"] = error_type
    out.update(data)
    return out


def _apply(action: str, light_id: Any, request, bridge_ip: Optional[str],
           api_key: Optional[str], **extra: Any) -> Dict[str, Any]:
    target = parse_target(light_id)
    client = _get_client(bridge_ip, api_key)
    outcome = apply_state(client, target, request)

    if not outcome.result.ok:
        errors = list(outcome.result.errors)
        return _err(
            str(BridgeError(errors)),
            error_type="BridgeError",
            action=action,
            errors=errors,
        )

    return _ok(
        action=action,
        target_type="group" if isinstance(target, AllLights) else "light",
        result=outcome.summary,
        **extra,
    )


# Action implementations
def _list_lights(bridge_ip: Optional[str] = None, api_key: Optional[str] = None, **kwargs) -> Dict[str, Any]:
    """List all lights."""
    client = _get_client(bridge_ip, api_key)
    lights = list_lights(client)
    return _ok(action="list_lights", lights=lights, count=len(lights))


def _get_light(light_id: Optional[Union[int, str]] = None, bridge_ip: Optional[str] = None,
               api_key: Optional[str] = None, **kwargs) -> Dict[str, Any]:
    """Get a specific light's state."""
    target = parse_target(light_id)
    if isinstance(target, AllLights):
        raise ValueError("get_light needs a single light id; use list_lights for all lights")

    client = _get_client(bridge_ip, api_key)
    snapshot = client.read(target.light_id)
    return _ok(action="get_light", light=summarize_light(target.light_id, snapshot))


def _set_brightness(light_id: Optional[Union[int, str]] = None, brightness: Optional[int] = None,
                    bridge_ip: Optional[str] = None, api_key: Optional[str] = None,
                    **kwargs) -> Dict[str, Any]:
    """Set brightness for a light or all lights."""
    if brightness is None:
        raise ValueError("brightness is required (0-254)")

    request = brightness_request(brightness)
    return _apply("set_brightness", light_id, request, bridge_ip, api_key, brightness=request.brightness)


def _set_color(light_id: Optional[Union[int, str]] = None, color: Optional[str] = None,
               strict: bool = False, bridge_ip: Optional[str] = None,
               api_key: Optional[str] = None, **kwargs) -> Dict[str, Any]:
    """Set a light or all lights to a color or white temperature."""
    if not color:
        raise ValueError("color is required (hex like #FF0000, name like 'red', or temperature like 'warm'/'2700K')")

    spec = resolve(color, strict=bool(strict))
    return _apply(
        "set_color", light_id, color_request(spec), bridge_ip, api_key,
        color=color, color_spec=describe(spec),
    )


def _toggle_light(light_id: Optional[Union[int, str]] = None, on: Optional[bool] = None,
                  bridge_ip: Optional[str] = None, api_key: Optional[str] = None,
                  **kwargs) -> Dict[str, Any]:
    """Turn a light or all lights on or off."""
    if on is None:
        raise ValueError("on is required (true to turn on, false to turn off)")

    return _apply("toggle_light", light_id, power_request(on), bridge_ip, api_key, on=bool(on))


_ACTIONS = {
    "list_lights": _list_lights,
    "get_light": _get_light,
    "set_brightness": _set_brightness,
    "set_color": _set_color,
    "toggle_light": _toggle_light,
}


@tool
def hue(
    action: str,
    light_id: Optional[Union[int, str]] = None,
    brightness: Optional[int] = None,
    color: Optional[str] = None,
    on: Optional[bool] = None,
    strict: Optional[bool] = None,
    bridge_ip: Optional[str] = None,
    api_key: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Control Philips Hue lights.

    Actions:
    - list_lights: List all lights connected to the bridge
    - get_light: Get a specific light's state
    - set_brightness: Set brightness for a light or all lights
    - set_color: Change color using hex, a color name, or a white temperature
    - toggle_light: Turn a light or all lights on or off

    Args:
        action: The action to perform (required)
        light_id: Light ID, or "all" for all lights
        brightness: Brightness level 0-254 (0=off, 254=max)
        color: Color as hex (#FF0000), name (red), or temperature (warm/cool/2700K)
        on: True to turn on, False to turn off (toggle_light)
        strict: Fail on unknown color names instead of falling back to white
        bridge_ip: IP address of the Hue Bridge (optional, uses HUE_BRIDGE_IP env var if not provided)
        api_key: Bridge API key (optional, uses HUE_API_KEY env var if not provided)

    Returns:
        dict with success status and action-specific data
    """
    action = (action or "").strip().lower()

    if action not in _ACTIONS:
        return _err(
            f"Unknown action: {action}",
            error_type="InvalidAction",
            available_actions=list(_ACTIONS.keys()),
        )

    # Build kwargs dict from explicit parameters
    kwargs: Dict[str, Any] = {}
    if light_id is not None:
        kwargs["light_id"] = light_id
    if brightness is not None:
        kwargs["brightness"] = brightness
    if color is not None:
        kwargs["color"] = color
    if on is not None:
        kwargs["on"] = on
    if strict is not None:
        kwargs["strict"] = strict
    if bridge_ip is not None:
        kwargs["bridge_ip"] = bridge_ip
    if api_key is not None:
        kwargs["api_key"] = api_key

    try:
        return _ACTIONS[action](**kwargs)
    except ImportError as e:
        return _err(str(e), error_type="ImportError")
    except ValueError as e:
        return _err(str(e), error_type="ValueError", action=action)
    except Exception as e:
        logger.warning("hue action %s failed: %s", action, e)
        return _err(str(e), error_type=type(e).__name__, action=action)
