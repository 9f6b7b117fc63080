"""
Tests for visit analytics: device classification and geolocation.
"""
from unittest.mock import Mock

import pytest
import requests

from shortlink_app.analytics.device import Device, classify_device
from shortlink_app.analytics.geo import GeoLocator, normalize_lookup_ip, parse_country


FALLBACK_IP = "177.37.0.1"


class TestClassifyDevice:

    @pytest.mark.parametrize("user_agent, expected", [
        ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0", Device.WINDOWS),
        ("Mozilla/5.0 (X11; Linux x86_64) Firefox/121.0", Device.LINUX),
        ("Mozilla/5.0 (Linux; Android 14; Pixel 8) Chrome/120.0 Mobile", Device.ANDROID),
        ("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Safari/604.1", Device.IOS),
        ("Mozilla/5.0 (iPad; CPU OS 16_6 like Mac OS X) Safari/604.1", Device.IOS),
        ("Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) Safari/605.1.15", Device.MACOS),
        ("curl/8.4.0", Device.UNKNOWN),
        ("", Device.UNKNOWN),
        (None, Device.UNKNOWN),
    ])
    def test_classification(self, user_agent, expected):
        assert classify_device(user_agent) == expected

    def test_android_wins_over_linux(self):
        assert classify_device("linux android") == Device.ANDROID

    def test_linux_alone(self):
        assert classify_device("some linux box") == Device.LINUX

    def test_case_insensitive(self):
        assert classify_device("ANDROID") == Device.ANDROID
        assert classify_device("WiNdOwS") == Device.WINDOWS

    def test_values_are_stored_names(self):
        assert [d.value for d in Device] == ["Windows", "Linux", "Android", "iOS", "MacOS", "Unknown"]


class TestNormalizeLookupIp:

    @pytest.mark.parametrize("ip", [None, "", "127.0.0.1", "127.1.2.3", "::1", "::ffff:127.0.0.1", "0.0.0.0", "testclient"])
    def test_unlocatable_addresses_use_fallback(self, ip):
        assert normalize_lookup_ip(ip, FALLBACK_IP) == FALLBACK_IP

    @pytest.mark.parametrize("ip, expected", [
        ("8.8.8.8", "8.8.8.8"),
        (" 200.147.67.142 ", "200.147.67.142"),
        ("2001:4860:4860::8888", "2001:4860:4860::8888"),
        ("::ffff:8.8.4.4", "8.8.4.4"),
    ])
    def test_public_addresses_pass_through(self, ip, expected):
        assert normalize_lookup_ip(ip, FALLBACK_IP) == expected


class TestParseCountry:

    def test_success(self):
        assert parse_country({"status": "success", "country": "Brazil"}) == "Brazil"

    @pytest.mark.parametrize("payload", [
        {"status": "fail", "message": "private range"},
        {"status": "success"},
        {"status": "success", "country": ""},
        {"status": "success", "country": 42},
        [],
        None,
    ])
    def test_anything_else_is_unknown(self, payload):
        assert parse_country(payload) == "Unknown"


class TestGeoLocator:

    def make_locator(self, session):
        return GeoLocator(session, "http://geo.test/json/", timeout=1.5, fallback_ip=FALLBACK_IP)

    def test_lookup_country(self):
        session = Mock()
        session.get.return_value.json.return_value = {"status": "success", "country": "Portugal"}

        assert self.make_locator(session).lookup_country("85.138.0.1") == "Portugal"
        session.get.assert_called_once_with(
            "http://geo.test/json/85.138.0.1",
            params={"fields": "status,country"},
            timeout=1.5,
        )

    def test_loopback_is_looked_up_as_fallback(self):
        session = Mock()
        session.get.return_value.json.return_value = {"status": "success", "country": "Brazil"}

        assert self.make_locator(session).lookup_country("127.0.0.1") == "Brazil"
        assert session.get.call_args.args[0] == f"http://geo.test/json/{FALLBACK_IP}"

    def test_network_error_is_unknown(self):
        session = Mock()
        session.get.side_effect = requests.ConnectionError("no route to host")

        assert self.make_locator(session).lookup_country("8.8.8.8") == "Unknown"

    def test_http_error_is_unknown(self):
        session = Mock()
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("429 Too Many Requests")

        assert self.make_locator(session).lookup_country("8.8.8.8") == "Unknown"

    def test_bad_json_is_unknown(self):
        session = Mock()
        session.get.return_value.json.side_effect = ValueError("Expecting value")

        assert self.make_locator(session).lookup_country("8.8.8.8") == "Unknown"

    def test_close_closes_session(self):
        session = Mock()
        self.make_locator(session).close()
        session.close.assert_called_once()
