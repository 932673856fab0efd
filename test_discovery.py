# test_discovery.py
import asyncio
import json

import httpx

from app.services.discovery import (
    build_discovery_prompt,
    build_estimates,
    discover_stores,
    match_evidence,
    parse_store_array,
)
from app.services.gemini import Citation, GeminiClient

ZEPTO_ONLY = (
    "Here is what I found near you:\n"
    '[{"platform":"Zepto","found":true,"storeName":"X","storeAddress":"Y","distanceKm":1}]'
)


def _payload(text, chunks=None):
    return {
        "candidates": [
            {
                "content": {"parts": [{"text": text}]},
                "groundingMetadata": {"groundingChunks": chunks or []},
            }
        ]
    }


def _client(handler, api_key="test-key"):
    return GeminiClient(
        api_key=api_key,
        model="gemini-test",
        base_url="https://gemini.test/v1beta",
        transport=httpx.MockTransport(handler),
    )


def test_prompt_names_location_and_platforms():
    prompt = build_discovery_prompt("HSR Layout Sector 2")
    assert '"HSR Layout Sector 2"' in prompt
    for name in ("Zepto", "Blinkit", "Swiggy Instamart"):
        assert name in prompt
    assert '"distanceKm"' in prompt


def test_parse_array_inside_prose():
    rows = parse_store_array(ZEPTO_ONLY)
    assert rows == [
        {"platform": "Zepto", "found": True, "storeName": "X", "storeAddress": "Y", "distanceKm": 1}
    ]


def test_parse_array_inside_code_fence():
    text = '```json\n[{"platform": "Blinkit", "found": false, "distanceKm": 0}]\n```'
    assert parse_store_array(text)[0]["platform"] == "Blinkit"


def test_parse_without_array_is_empty():
    assert parse_store_array("Sorry, I could not find anything.") == []
    assert parse_store_array("") == []
    assert parse_store_array(None) == []


def test_parse_malformed_array_is_empty():
    assert parse_store_array('[{"platform": "Zepto", found: yes}]') == []


def test_parse_drops_non_objects():
    assert parse_store_array('[1, "a", {"platform": "Zepto"}]') == [{"platform": "Zepto"}]


def test_zepto_found_others_placeholder():
    estimates = build_estimates(parse_store_array(ZEPTO_ONLY))

    assert [e.platform for e in estimates] == ["Zepto", "Blinkit", "Swiggy Instamart"]
    zepto, blinkit, instamart = estimates
    assert zepto.source == "Live Search"
    assert zepto.store_name == "X"
    assert zepto.store_address == "Y"
    assert zepto.estimated_travel_time_min == 5
    assert zepto.feasibility == "Highly Feasible"
    assert zepto.color == "#9333ea"
    for e in (blinkit, instamart):
        assert e.source == "Not Found"
        assert e.feasibility == "Unknown"
        assert e.distance_km == 0
        assert e.estimated_travel_time_min == 0
        assert e.color == "#cbd5e1"
        assert e.evidence_link is None


def test_no_array_gives_three_placeholders():
    estimates = build_estimates(parse_store_array("nothing here"))
    assert len(estimates) == 3
    assert all(e.source == "Not Found" for e in estimates)


def test_found_false_and_bad_distance_are_placeholders():
    raw = [
        {"platform": "Zepto", "found": False, "distanceKm": 1.0},
        {"platform": "Blinkit", "found": True, "distanceKm": -2},
        {"platform": "Swiggy Instamart", "found": True, "distanceKm": "far"},
    ]
    assert all(e.source == "Not Found" for e in build_estimates(raw))


def test_evidence_matches_only_named_platform():
    evidence = match_evidence([Citation(title="Blinkit Store - MG Road", uri="https://maps/b")])
    assert evidence == {"Blinkit": "https://maps/b"}

    estimates = build_estimates(
        [
            {"platform": p, "found": True, "storeName": p, "storeAddress": "a", "distanceKm": 1}
            for p in ("Zepto", "Blinkit", "Swiggy Instamart")
        ],
        evidence,
    )
    assert [e.evidence_link for e in estimates] == [None, "https://maps/b", None]


def test_evidence_alternate_names_and_first_match():
    evidence = match_evidence(
        [
            Citation(title="INSTAMART dark store", uri="https://maps/i1"),
            Citation(title="Swiggy Instamart Hub", uri="https://maps/i2"),
            Citation(title="zepto cafe", uri="https://maps/z"),
            Citation(title="Zepto Koramangala", uri="https://maps/z2"),
            Citation(title="Blinkit", uri=""),
        ]
    )
    assert evidence == {"Swiggy Instamart": "https://maps/i1", "Zepto": "https://maps/z"}


def test_discover_stores_end_to_end():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        chunks = [{"maps": {"title": "Zepto - Indiranagar", "uri": "https://maps/z"}}]
        return httpx.Response(200, json=_payload(ZEPTO_ONLY, chunks))

    estimates = asyncio.run(discover_stores("Indiranagar", client=_client(handler)))

    assert seen["url"] == "https://gemini.test/v1beta/models/gemini-test:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"]["tools"] == [{"googleMaps": {}}]
    assert "generationConfig" not in seen["body"]
    assert estimates[0].evidence_link == "https://maps/z"
    assert [e.source for e in estimates] == ["Live Search", "Not Found", "Not Found"]


def test_discover_stores_http_error_is_empty():
    def handler(request):
        return httpx.Response(503, json={"error": {"message": "overloaded"}})

    assert asyncio.run(discover_stores("Indiranagar", client=_client(handler))) == []


def test_discover_stores_network_error_is_empty():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    assert asyncio.run(discover_stores("Indiranagar", client=_client(handler))) == []


def test_discover_stores_without_key_is_empty():
    def handler(request):
        raise AssertionError("should not be called")

    client = _client(handler, api_key=None)
    assert asyncio.run(discover_stores("Indiranagar", client=client)) == []


def test_numeric_string_distance_is_coerced():
    rows = parse_store_array(
        '[{"platform":"Zepto","found":true,"storeName":"X","storeAddress":"Y","distanceKm":"1.5"}]'
    )
    zepto = build_estimates(rows)[0]
    assert zepto.source == "Live Search"
    assert zepto.distance_km == 1.5
    # 4.5 + 2 = 6.5 -> 7
    assert zepto.estimated_travel_time_min == 7
    assert zepto.feasibility == "Highly Feasible"


def test_bool_nan_inf_distances_rejected():
    raw = [
        {"platform": "Zepto", "found": True, "distanceKm": True},
        {"platform": "Blinkit", "found": True, "distanceKm": "nan"},
        {"platform": "Swiggy Instamart", "found": True, "distanceKm": "inf"},
    ]
    assert all(e.source == "Not Found" for e in build_estimates(raw))


def test_evidence_ignores_non_web_links():
    evidence = match_evidence(
        [
            Citation(title="Blinkit Store", uri="javascript:alert(1)"),
            Citation(title="Blinkit Store - MG Road", uri="HTTPS://maps/b"),
            Citation(title="Zepto", uri="data:text/html,hi"),
        ]
    )
    assert evidence == {"Blinkit": "HTTPS://maps/b"}
