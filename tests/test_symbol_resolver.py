"""
Tests for region symbol resolution and endpoint discovery.
"""

import asyncio

import pytest

from portal_fakes import (
    HOST,
    LOGIN_PAGE,
    STUDENT_URLS,
    html_response,
    index_page,
    make_client,
    script_login,
)
from uonet.auth.symbol_resolver import RegionSymbol, extract_endpoint_urls, is_authenticated_page
from uonet.errors import TransportError, UnknownSymbolError
from uonet.utils import start_index_url


class TestExtractEndpointUrls:

    def test_panel_links_in_document_order(self):
        assert extract_endpoint_urls(index_page()) == STUDENT_URLS

    def test_ignores_other_panels_and_modules(self):
        urls = extract_endpoint_urls(index_page())
        assert not any("wiadomosciplus" in url for url in urls)
        assert not any("/other/" in url for url in urls)

    def test_empty_panel(self):
        assert extract_endpoint_urls(index_page([])) == []

    def test_landmark(self):
        assert is_authenticated_page(index_page())
        assert not is_authenticated_page(LOGIN_PAGE)


class TestSetSymbol:

    def test_no_symbol_initially(self):
        client, _ = make_client()
        assert client.get_symbol() is None
        assert client.region_symbol is None

    def test_resolves_symbol_and_urls(self):
        client, transport = make_client()
        transport.add("GET", start_index_url(HOST, "A"), html_response(index_page()))

        asyncio.run(client.set_symbol("A"))

        assert client.get_symbol() == "A"
        assert client.region_symbol == RegionSymbol("A", tuple(STUDENT_URLS))

    def test_symbol_without_landmark_keeps_previous(self):
        client, transport = make_client()
        transport.add("GET", start_index_url(HOST, "A"), html_response(index_page()))
        transport.add("GET", start_index_url(HOST, "Z"), html_response(LOGIN_PAGE))

        asyncio.run(client.set_symbol("A"))
        with pytest.raises(UnknownSymbolError) as info:
            asyncio.run(client.set_symbol("Z"))

        assert info.value.symbol == "Z"
        assert client.get_symbol() == "A"
        assert client.region_symbol.url_list == tuple(STUDENT_URLS)

    def test_transport_failure_is_unknown_symbol(self):
        client, transport = make_client()
        transport.add(
            "GET", start_index_url(HOST, "A"),
            TransportError("HTTP 500", url=start_index_url(HOST, "A"), status=500),
        )

        with pytest.raises(UnknownSymbolError):
            asyncio.run(client.set_symbol("A"))
        assert client.get_symbol() is None

    def test_replaces_previous_symbol(self):
        client, transport = make_client()
        transport.add("GET", start_index_url(HOST, "A"), html_response(index_page()))
        transport.add("GET", start_index_url(HOST, "B"), html_response(index_page(STUDENT_URLS[:1])))

        asyncio.run(client.set_symbol("A"))
        first = client.region_symbol
        asyncio.run(client.set_symbol("B"))

        assert client.region_symbol == RegionSymbol("B", tuple(STUDENT_URLS[:1]))
        assert first == RegionSymbol("A", tuple(STUDENT_URLS))

    def test_every_valid_login_symbol_resolves(self):
        client, transport = make_client()
        script_login(transport, valid=["A", "B"], candidates=["A", "B", "C"])
        for symbol in ("A", "B"):
            transport.add("GET", start_index_url(HOST, symbol), html_response(index_page()))

        async def scenario():
            symbols = await client.login()
            for symbol in symbols:
                await client.set_symbol(symbol)
                assert set(STUDENT_URLS) <= set(client.region_symbol.url_list)
            return symbols

        assert asyncio.run(scenario()) == ["A", "B"]
