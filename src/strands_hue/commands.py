"""
Command projection: turn a target and a desired light state into bridge calls.

A specific light gets one mutation followed by a confirming read. The "all"
target maps onto bridge group 0, which offers no per-light confirmation, so its
summary is built from the request itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from strands_hue.bridge import BridgeClient, error_entries
from strands_hue.colors import ColorSpec, describe

logger = logging.getLogger(__name__)

ALL_LIGHTS = "all"
MIN_BRIGHTNESS = 0
MAX_BRIGHTNESS = 254


@dataclass(frozen=True)
class LightTarget:
    """One bulb, by bridge-assigned id."""

    light_id: str


@dataclass(frozen=True)
class AllLights:
    """Every light on the bridge (group 0)."""


TargetSelector = Union[LightTarget, AllLights]


@dataclass(frozen=True)
class LightStateRequest:
    """Attributes to apply. Unset fields are left alone on the bridge."""

    on: Optional[bool] = None
    brightness: Optional[int] = None
    color: Optional[ColorSpec] = None

    def to_attributes(self) -> Dict[str, Any]:
        attrs: Dict[str, Any] = {}
        if self.color is not None:
            attrs.update(self.color.to_attributes())
        if self.brightness is not None:
            attrs["bri"] = self.brightness
        if self.on is not None:
            attrs["on"] = self.on
        return attrs


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one mutation; empty errors means every attribute was accepted."""

    errors: Tuple[Dict[str, Any], ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class Outcome:
    """Batch result plus the state summary reported back to the caller."""

    result: BatchResult
    summary: Optional[Dict[str, Any]] = None


def validate_brightness(brightness: Any) -> int:
    if isinstance(brightness, float) and brightness.is_integer():
        brightness = int(brightness)
    if isinstance(brightness, bool) or not isinstance(brightness, int):
        raise ValueError("Brightness must be an integer between 0 and 254")
    if brightness < MIN_BRIGHTNESS or brightness > MAX_BRIGHTNESS:
        raise ValueError("Brightness must be between 0 and 254")
    return brightness


def parse_target(light_id: Any) -> TargetSelector:
    """Map a tool ``light_id`` argument onto a target selector."""
    if light_id is None or str(light_id).strip() == "":
        raise ValueError("light_id is required (a light id or 'all')")
    value = str(light_id).strip()
    if value.lower() == ALL_LIGHTS:
        return AllLights()
    return LightTarget(value)


def brightness_request(brightness: int, on: Optional[bool] = None) -> LightStateRequest:
    """Brightness change; power follows brightness unless given explicitly."""
    brightness = validate_brightness(brightness)
    if on is None:
        on = brightness > 0
    return LightStateRequest(on=on, brightness=brightness)


def color_request(color: ColorSpec, brightness: Optional[int] = None) -> LightStateRequest:
    # a color is only visible on a lit bulb
    if brightness is not None:
        brightness = validate_brightness(brightness)
    return LightStateRequest(on=True, brightness=brightness, color=color)


def power_request(on: bool) -> LightStateRequest:
    return LightStateRequest(on=bool(on))


def check_acknowledgements(response: Any) -> BatchResult:
    """Collapse a bridge ack list into one result; any error fails the batch."""
    errors = error_entries(response)
    if errors:
        logger.warning("bridge reported %d error(s): %s", len(errors), errors)
    return BatchResult(errors=tuple(errors))


def summarize_light(light_id: str, snapshot: Dict[str, Any]) -> Dict[str, Any]:
    state = snapshot.get("state") or {}
    summary = {
        "id": str(light_id),
        "name": snapshot.get("name"),
        "type": snapshot.get("type"),
        "on": state.get("on"),
        "brightness": state.get("bri"),
        "reachable": state.get("reachable"),
        "colorMode": state.get("colormode"),
    }
    if "xy" in state:
        summary["xy"] = state["xy"]
    if "ct" in state:
        summary["ct"] = state["ct"]
    if snapshot.get("modelid"):
        summary["modelId"] = snapshot["modelid"]
    return summary


def _group_summary(request: LightStateRequest) -> Dict[str, Any]:
    if request.color is not None:
        message = "All lights color updated"
    elif request.brightness is not None:
        message = "All lights updated"
    elif request.on is not None:
        message = f"All lights turned {'on' if request.on else 'off'}"
    else:
        message = "All lights updated"

    summary: Dict[str, Any] = {"message": message}
    if request.on is not None:
        summary["on"] = request.on
    if request.brightness is not None:
        summary["brightness"] = request.brightness
    if request.color is not None:
        summary["color"] = describe(request.color)
    return summary


def apply_state(client: BridgeClient, target: TargetSelector, request: LightStateRequest) -> Outcome:
    """Send ``request`` to ``target`` and report the resulting state.

    The read-back for a single light runs only after its mutation succeeded.
    """
    attrs = request.to_attributes()

    if isinstance(target, AllLights):
        result = check_acknowledgements(client.mutate_all(attrs))
        if not result.ok:
            return Outcome(result)
        return Outcome(result, _group_summary(request))

    result = check_acknowledgements(client.mutate_light(target.light_id, attrs))
    if not result.ok:
        return Outcome(result)
    snapshot = client.read(target.light_id)
    return Outcome(result, summarize_light(target.light_id, snapshot))


def list_lights(client: BridgeClient) -> List[Dict[str, Any]]:
    lights = client.read_all()
    return [summarize_light(light_id, snapshot) for light_id, snapshot in lights.items()]
