"""Tests for Hue light control tool."""

from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.read.return_value = {
        "name": "Desk Lamp",
        "type": "Extended color light",
        "state": {"on": True, "bri": 200, "colormode": "xy", "xy": [0.64, 0.33], "reachable": True},
    }
    client.mutate_light.return_value = [{"success": {"/lights/1/state/on": True}}]
    client.mutate_all.return_value = [{"success": {"/groups/0/action/on": True}}]
    return client


def test_hue_unknown_action():
    """Test error for unknown action."""
    from strands_hue import hue

    result = hue(action="unknown_action")

    assert result["success"] is False
    assert "Unknown action" in result["error"]
    assert result["error_type"] == "InvalidAction"
    assert "set_color" in result["available_actions"]


def test_hue_list_lights_missing_bridge():
    """Test error when bridge IP is missing."""
    from strands_hue import hue
    from strands_hue.hue import _client_cache

    _client_cache.clear()

    with patch.dict("os.environ", {}, clear=True):
        result = hue(action="list_lights")

    assert result["success"] is False
    assert "bridge_ip" in result["error"].lower() or "not installed" in result["error"].lower()


def test_hue_set_brightness_out_of_range_makes_no_bridge_call():
    """Test brightness 255 is rejected before any bridge call."""
    from strands_hue import hue

    with patch("strands_hue.hue._get_client") as get_client:
        result = hue(action="set_brightness", light_id="1", brightness=255)

    assert result["success"] is False
    assert result["error_type"] == "ValueError"
    assert "between 0 and 254" in result["error"]
    get_client.assert_not_called()


def test_hue_set_brightness_missing_value():
    from strands_hue import hue

    result = hue(action="set_brightness", light_id="1")

    assert result["success"] is False
    assert result["error_type"] == "ValueError"
    assert result["action"] == "set_brightness"
    assert "brightness" in result["error"]


def test_hue_set_brightness_missing_target():
    from strands_hue import hue

    with patch("strands_hue.hue._get_client"):
        result = hue(action="set_brightness", brightness=200)

    assert result["success"] is False
    assert "light_id" in result["error"]


def test_hue_set_color_missing_color():
    from strands_hue import hue

    result = hue(action="set_color", light_id="1")

    assert result["success"] is False
    assert result["error_type"] == "ValueError"
    assert result["action"] == "set_color"
    assert "color" in result["error"]


def test_hue_toggle_light_missing_state():
    from strands_hue import hue

    result = hue(action="toggle_light", light_id="1")

    assert result["success"] is False
    assert result["error_type"] == "ValueError"
    assert result["action"] == "toggle_light"
    assert "on is required" in result["error"]


def test_hue_list_lights_mocked(mock_client):
    from strands_hue import hue

    mock_client.read_all.return_value = {
        "1": {"name": "Desk Lamp", "type": "Extended color light",
              "state": {"on": True, "bri": 254, "colormode": "xy", "reachable": True}},
        "2": {"name": "Hallway", "type": "Dimmable light",
              "state": {"on": False, "bri": 0, "reachable": False}},
    }

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="list_lights")

    assert result["success"] is True
    assert result["action"] == "list_lights"
    assert result["count"] == 2
    assert result["lights"][0] == {
        "id": "1",
        "name": "Desk Lamp",
        "type": "Extended color light",
        "on": True,
        "brightness": 254,
        "reachable": True,
        "colorMode": "xy",
    }
    assert result["lights"][1]["colorMode"] is None


def test_hue_get_light_mocked(mock_client):
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="get_light", light_id=1)

    assert result["success"] is True
    assert result["light"]["id"] == "1"
    assert result["light"]["name"] == "Desk Lamp"
    mock_client.read.assert_called_once_with("1")


def test_hue_get_light_rejects_all(mock_client):
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="get_light", light_id="all")

    assert result["success"] is False
    assert result["error_type"] == "ValueError"
    assert "list_lights" in result["error"]


def test_hue_set_brightness_light_mocked(mock_client):
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="set_brightness", light_id="1", brightness=200)

    assert result["success"] is True
    assert result["action"] == "set_brightness"
    assert result["target_type"] == "light"
    assert result["brightness"] == 200
    assert result["result"]["brightness"] == 200
    mock_client.mutate_light.assert_called_once_with("1", {"bri": 200, "on": True})
    mock_client.read.assert_called_once_with("1")


def test_hue_set_brightness_zero_turns_all_off(mock_client):
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="set_brightness", light_id="all", brightness=0)

    assert result["success"] is True
    assert result["target_type"] == "group"
    assert result["result"]["message"] == "All lights updated"
    mock_client.mutate_all.assert_called_once_with({"bri": 0, "on": False})
    mock_client.read.assert_not_called()


def test_hue_set_color_hex_mocked(mock_client):
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="set_color", light_id="1", color="#FF0000")

    assert result["success"] is True
    assert result["color"] == "#FF0000"
    assert result["color_spec"]["mode"] == "xy"
    attrs = mock_client.mutate_light.call_args[0][1]
    assert attrs["on"] is True
    assert attrs["xy"][0] == pytest.approx(0.64, abs=0.01)
    assert attrs["xy"][1] == pytest.approx(0.33, abs=0.01)
    assert "ct" not in attrs


def test_hue_set_color_temperature_all_mocked(mock_client):
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="set_color", light_id="all", color="2700K")

    assert result["success"] is True
    assert result["color_spec"] == {"mode": "ct", "ct": 370}
    assert result["result"]["message"] == "All lights color updated"
    mock_client.mutate_all.assert_called_once_with({"ct": 370, "on": True})


def test_hue_set_color_unknown_name_defaults_to_white(mock_client):
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="set_color", light_id="1", color="notacolor")
        white = hue(action="set_color", light_id="1", color="#FFFFFF")

    assert result["success"] is True
    assert result["color_spec"] == white["color_spec"]


def test_hue_set_color_strict_rejects_unknown_name(mock_client):
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="set_color", light_id="1", color="notacolor", strict=True)

    assert result["success"] is False
    assert "Unknown color" in result["error"]
    mock_client.mutate_light.assert_not_called()


def test_hue_toggle_light_mocked(mock_client):
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="toggle_light", light_id="all", on=False)

    assert result["success"] is True
    assert result["on"] is False
    assert result["result"]["message"] == "All lights turned off"
    mock_client.mutate_all.assert_called_once_with({"on": False})


def test_hue_partial_failure_reported_as_error(mock_client):
    """Test an error entry fails the whole call even next to successes."""
    from strands_hue import hue

    mock_client.mutate_light.return_value = [
        {"success": {"/lights/1/state/on": True}},
        {"error": {"type": 7, "address": "/lights/1/state/bri", "description": "invalid value, 300, for parameter, bri"}},
    ]

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="set_brightness", light_id="1", brightness=200)

    assert result["success"] is False
    assert result["error_type"] == "BridgeError"
    assert result["error"].startswith("Hue API error:")
    assert "invalid value" in result["error"]
    assert len(result["errors"]) == 1
    mock_client.read.assert_not_called()


def test_hue_transport_error_reported(mock_client):
    from strands_hue import hue

    mock_client.mutate_light.side_effect = ConnectionRefusedError("Connection refused")

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="toggle_light", light_id="1", on=True)

    assert result["success"] is False
    assert result["error_type"] == "ConnectionRefusedError"
    assert result["action"] == "toggle_light"


def test_get_client_caches_per_bridge():
    """Test a cached bridge is reused without building a new phue Bridge."""
    from strands_hue import bridge as bridge_module
    from strands_hue.hue import _client_cache, _get_client

    _client_cache.clear()
    mock_phue = MagicMock()

    with patch.object(bridge_module, "_get_phue", return_value=mock_phue):
        first = _get_client("192.168.1.2", "key")
        second = _get_client("192.168.1.2", "key")
        third = _get_client("192.168.1.2", "key")
        other = _get_client("192.168.1.3", "key")

    assert first is second is third
    assert other is not first
    assert mock_phue.Bridge.call_count == 2
    _client_cache.clear()


def test_get_client_uses_env_for_cache_key():
    from strands_hue import bridge as bridge_module
    from strands_hue.hue import _client_cache, _get_client

    _client_cache.clear()
    mock_phue = MagicMock()

    with patch.object(bridge_module, "_get_phue", return_value=mock_phue):
        with patch.dict("os.environ", {"HUE_BRIDGE_IP": "192.168.1.2", "HUE_API_KEY": "key"}, clear=True):
            from_env = _get_client()
        explicit = _get_client("192.168.1.2", "key")

    assert from_env is explicit
    mock_phue.Bridge.assert_called_once_with("192.168.1.2", username="key")
    _client_cache.clear()


def test_hue_set_color_huge_kelvin_saturates(mock_client):
    """Test an absurdly long Kelvin token resolves to the coldest white."""
    from strands_hue import hue

    with patch("strands_hue.hue._get_client", return_value=mock_client):
        result = hue(action="set_color", light_id="all", color="1" + "0" * 400)

    assert result["success"] is True
    assert result["color_spec"] == {"mode": "ct", "ct": 153}
    mock_client.mutate_all.assert_called_once_with({"ct": 153, "on": True})
