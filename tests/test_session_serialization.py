"""
Tests for session snapshots: bundle layout, exact round trips, isolation
between live client and snapshot, and the aiohttp cookie-state codec.
"""

import asyncio
import copy
import json
import time
from email.utils import parsedate_to_datetime
from http.cookies import SimpleCookie

import aiohttp
import pytest
from yarl import URL

from portal_fakes import (
    HOST,
    STUDENT_URLS,
    CountingProvider,
    FakeTransport,
    envelope,
    html_response,
    index_page,
    make_client,
)
from uonet.auth.session_store import SessionFile, read_bundle
from uonet.auth.symbol_resolver import RegionSymbol
from uonet.client import Client
from uonet.transport import SessionCookieJar, Transport, export_cookie_jar, restore_cookie_jar
from uonet.utils import lucky_numbers_url, start_index_url


def _resolved_client():
    client, transport = make_client()
    transport.set_cookie("EfebSsoAuthCookie", "abc123", domain=f"cufs.{HOST}")
    transport.set_cookie("idBiezacyUczen", "111")
    transport.add("GET", start_index_url(HOST, "A"), html_response(index_page()))
    asyncio.run(client.set_symbol("A"))
    return client, transport


# ====================================================================
# Bundle layout
# ====================================================================

class TestSerialize:

    def test_layout(self):
        client, transport = _resolved_client()
        bundle = client.serialize()

        assert set(bundle) == {"cookieJar", "symbol", "host"}
        assert bundle["host"] == HOST
        assert bundle["symbol"] == {"value": "A", "urlList": STUDENT_URLS}
        assert bundle["cookieJar"] == transport.export_cookies()
        json.dumps(bundle)

    def test_no_symbol(self):
        client, _ = make_client()
        assert client.serialize()["symbol"] is None

    def test_snapshot_is_detached_from_client(self):
        client, transport = _resolved_client()
        bundle = client.serialize()
        snapshot = copy.deepcopy(bundle)

        transport.add("GET", start_index_url(HOST, "B"), html_response(index_page([])))
        asyncio.run(client.set_symbol("B"))
        transport.set_cookie("late", "cookie")

        assert bundle == snapshot

    def test_credentials_never_serialized(self):
        client, _ = _resolved_client()
        text = json.dumps(client.serialize())
        assert "jan123" not in text


# ====================================================================
# Restore
# ====================================================================

class TestDeserialize:

    def test_round_trip_is_exact(self):
        client, _ = _resolved_client()
        bundle = client.serialize()

        restored = Client.deserialize(bundle, CountingProvider(), transport_factory=FakeTransport)

        assert restored.serialize() == bundle

    def test_restore_makes_no_requests(self):
        client, _ = _resolved_client()
        provider = CountingProvider()

        restored = Client.deserialize(client.serialize(), provider, transport_factory=FakeTransport)

        assert restored.transport.calls == []
        assert provider.calls == 0
        assert restored.get_symbol() == "A"
        assert restored.region_symbol == RegionSymbol("A", tuple(STUDENT_URLS))

    def test_restored_client_injects_cookie_state(self):
        client, transport = _resolved_client()
        restored = Client.deserialize(client.serialize(), CountingProvider(), transport_factory=FakeTransport)

        assert restored.transport.cookie_state == transport.export_cookies()

    def test_bundle_mutation_does_not_leak(self):
        client, _ = _resolved_client()
        bundle = client.serialize()
        restored = Client.deserialize(bundle, CountingProvider(), transport_factory=FakeTransport)

        bundle["symbol"]["urlList"].append("https://evil.example/")
        bundle["cookieJar"]["cookies"].clear()

        assert restored.region_symbol.url_list == tuple(STUDENT_URLS)
        assert restored.serialize()["cookieJar"]["cookies"]

    def test_restored_client_calls_features_directly(self):
        client, _ = _resolved_client()
        provider = CountingProvider()
        restored = Client.deserialize(client.serialize(), provider, transport_factory=FakeTransport)
        restored.transport.add("POST", lucky_numbers_url(HOST, "A"), envelope([]))

        assert asyncio.run(restored.get_lucky_numbers()) == []
        assert provider.calls == 0
        assert restored.transport.urls_called() == [lucky_numbers_url(HOST, "A")]

    def test_missing_keys(self):
        with pytest.raises(ValueError):
            read_bundle({"symbol": None})


# ====================================================================
# Cookie-state codec (real aiohttp jar)
# ====================================================================

_COOKIE_STATE = {
    "version": 1,
    "cookies": [
        {
            "name": "EfebSsoAuthCookie",
            "value": "abc123",
            "domain": "cufs.fakelog.cf",
            "host_only": False,
            "path": "/",
            "expires": "",
            "secure": True,
            "httponly": True,
        },
        {
            "name": "idBiezacyDziennik",
            "value": "101",
            "domain": "uonetplus-uczen.fakelog.cf",
            "host_only": False,
            "path": "/powiatwulkanowy/",
            "expires": "Fri, 31 Dec 2100 23:59:59 GMT",
            "secure": False,
            "httponly": False,
        },
        {
            "name": "ASP.NET_SessionId",
            "value": "s3ss10n",
            "domain": "uonetplus.fakelog.cf",
            "host_only": True,
            "path": "/",
            "expires": "",
            "secure": True,
            "httponly": True,
        },
    ],
}


class TestCookieState:

    def test_jar_round_trip(self):
        async def scenario():
            jar = aiohttp.CookieJar()
            restore_cookie_jar(jar, _COOKIE_STATE)
            return export_cookie_jar(jar)

        assert asyncio.run(scenario()) == _COOKIE_STATE

    def test_restored_cookies_are_sent(self):
        async def scenario():
            jar = aiohttp.CookieJar()
            restore_cookie_jar(jar, _COOKIE_STATE)
            return jar.filter_cookies(URL("https://cufs.fakelog.cf/Default/Account/LogOn"))

        cookies = asyncio.run(scenario())
        assert cookies["EfebSsoAuthCookie"].value == "abc123"
        assert "idBiezacyDziennik" not in cookies

    def test_host_only_cookie_stays_off_subdomains(self):
        origin = URL("https://uonetplus.fakelog.cf/")
        subdomain = URL("https://sub.uonetplus.fakelog.cf/")

        async def scenario():
            jar = SessionCookieJar()
            jar.update_cookies(SimpleCookie("hostonly=1; Path=/"), origin)
            jar.update_cookies(SimpleCookie("shared=2; Domain=uonetplus.fakelog.cf; Path=/"), origin)
            state = export_cookie_jar(jar)
            restored = aiohttp.CookieJar()
            restore_cookie_jar(restored, state)
            return state, sorted(jar.filter_cookies(subdomain)), sorted(restored.filter_cookies(subdomain))

        state, original_sent, restored_sent = asyncio.run(scenario())

        flags = {entry["name"]: entry["host_only"] for entry in state["cookies"]}
        assert flags == {"hostonly": True, "shared": False}
        assert original_sent == restored_sent == ["shared"]

    def test_max_age_cookie_expires_after_restore(self):
        origin = URL("https://uonetplus.fakelog.cf/")

        async def scenario():
            jar = SessionCookieJar()
            jar.update_cookies(SimpleCookie("hostonly=1; Path=/"), origin)
            jar.update_cookies(SimpleCookie("shortlived=2; Path=/; Max-Age=1"), origin)
            state = export_cookie_jar(jar)
            restored = aiohttp.CookieJar()
            restore_cookie_jar(restored, state)
            await asyncio.sleep(2.5)
            return state, sorted(jar.filter_cookies(origin)), sorted(restored.filter_cookies(origin))

        state, original_left, restored_left = asyncio.run(scenario())

        shortlived = next(entry for entry in state["cookies"] if entry["name"] == "shortlived")
        deadline = parsedate_to_datetime(shortlived["expires"]).timestamp()
        assert time.time() - 3 < deadline <= time.time()
        assert original_left == restored_left == ["hostonly"]

    def test_unknown_version(self):
        async def scenario():
            restore_cookie_jar(aiohttp.CookieJar(), {"version": 99, "cookies": []})

        with pytest.raises(ValueError):
            asyncio.run(scenario())

    def test_transport_exports_pending_state(self):
        """Before the first request the injected state is returned as-is."""
        transport = Transport(cookie_state=_COOKIE_STATE)
        assert transport.export_cookies() == _COOKIE_STATE
        assert transport.export_cookies() is not _COOKIE_STATE

    def test_fresh_transport_has_empty_state(self):
        assert Transport().export_cookies() == {"version": 1, "cookies": []}


# ====================================================================
# Session file (CLI)
# ====================================================================

class TestSessionFile:

    def test_save_and_load(self, tmp_path):
        client, _ = _resolved_client()
        store = SessionFile(str(tmp_path / "nested" / "session.json"))

        store.save(client.serialize())

        assert store.exists()
        assert store.load() == client.serialize()

    def test_missing_file(self, tmp_path):
        assert SessionFile(str(tmp_path / "none.json")).load() is None

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        assert SessionFile(str(path)).load() is None

    def test_not_a_bundle(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text('{"cookies": []}', encoding="utf-8")
        assert SessionFile(str(path)).load() is None

    def test_clear(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{}", encoding="utf-8")
        SessionFile(str(path)).clear()
        assert not path.exists()
