import json

import httpx
import pytest

import address_validation.services.google_validation as gv
from address_validation.cache.keys import ValidationCacheKey
from address_validation.config import settings
from address_validation.errors import (
    ApiError,
    ApiKeyMissingError,
    MalformedResponseError,
    TransportError,
)
from address_validation.models.request import ValidationOptions
from address_validation.services.google_validation import (
    build_request,
    build_request_body,
    validate_address,
)

_ENDPOINT = "https://addressvalidation.googleapis.com/v1:validateAddress?key=test-key"


class InMemoryCache:
    def __init__(self, entries: dict | None = None):
        self.entries: dict[str, dict] = dict(entries or {})
        self.sets: list[str] = []

    async def get(self, key):
        return self.entries.get(key.render())

    async def set(self, key, payload):
        self.sets.append(key.render())
        self.entries[key.render()] = payload

    async def invalidate(self, key):
        return 1 if self.entries.pop(key.render(), None) is not None else 0

    async def invalidate_all(self):
        count = len(self.entries)
        self.entries.clear()
        return count


@pytest.fixture(autouse=True)
def api_settings(monkeypatch):
    monkeypatch.setattr(settings, "api_key", "test-key")
    monkeypatch.setattr(settings, "api_base", "https://addressvalidation.googleapis.com/v1")
    gv._client = None
    yield
    gv._client = None


def test_build_request_splits_lines():
    request = build_request("1600 Amphitheatre Pkwy\n  Mountain View, CA  \n\n", "us")
    assert request.address_lines == ["1600 Amphitheatre Pkwy", "Mountain View, CA"]
    assert request.region_code == "US"


def test_build_request_accepts_line_list():
    request = build_request(["10 Downing Street", "London"])
    assert request.address_lines == ["10 Downing Street", "London"]
    assert request.region_code is None
    assert request.options == ValidationOptions()


@pytest.mark.parametrize("address", ["", "   \n ", []])
def test_build_request_rejects_empty_address(address):
    with pytest.raises(ValueError):
        build_request(address)


def test_build_request_body_with_usps():
    body = build_request_body(
        "1600 Amphitheatre Pkwy", "US", ValidationOptions(enable_usps=True, language_options="en")
    )
    assert body == {
        "address": {"addressLines": ["1600 Amphitheatre Pkwy"], "regionCode": "US"},
        "enableUspsCass": True,
        "languageOptions": {"languageCode": "en"},
    }


@pytest.mark.asyncio
async def test_validate_address_posts_request(httpx_mock, us_payload):
    httpx_mock.add_response(method="POST", url=_ENDPOINT, json=us_payload)

    response = await validate_address(
        "1600 Amphitheatre Pkwy, Mountain View, CA", "US", ValidationOptions(enable_usps=True)
    )
    assert response.get_response_id() == us_payload["responseId"]
    assert response.get_dpv_confirmation() == "Y"

    request = httpx_mock.get_request()
    assert request.method == "POST"
    assert json.loads(request.content) == {
        "address": {
            "addressLines": ["1600 Amphitheatre Pkwy, Mountain View, CA"],
            "regionCode": "US",
        },
        "enableUspsCass": True,
    }


@pytest.mark.asyncio
async def test_validate_address_without_api_key(monkeypatch):
    monkeypatch.setattr(settings, "api_key", None)
    with pytest.raises(ApiKeyMissingError):
        await validate_address("1600 Amphitheatre Pkwy")


@pytest.mark.asyncio
async def test_validate_address_api_error_message(httpx_mock):
    httpx_mock.add_response(
        method="POST",
        url=_ENDPOINT,
        status_code=400,
        json={
            "error": {
                "code": 400,
                "message": "API key not valid. Please pass a valid API key.",
                "status": "INVALID_ARGUMENT",
            }
        },
    )

    with pytest.raises(ApiError) as exc_info:
        await validate_address("1600 Amphitheatre Pkwy")
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "API key not valid. Please pass a valid API key."


@pytest.mark.asyncio
async def test_validate_address_api_error_without_json(httpx_mock):
    httpx_mock.add_response(method="POST", url=_ENDPOINT, status_code=503, text="upstream down")

    with pytest.raises(ApiError) as exc_info:
        await validate_address("1600 Amphitheatre Pkwy")
    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "Service Unavailable"


@pytest.mark.asyncio
async def test_validate_address_transport_error(httpx_mock):
    httpx_mock.add_exception(httpx.ConnectTimeout("timed out"))

    with pytest.raises(TransportError):
        await validate_address("1600 Amphitheatre Pkwy")


@pytest.mark.asyncio
async def test_validate_address_non_json_body(httpx_mock):
    httpx_mock.add_response(method="POST", url=_ENDPOINT, text="<html>oops</html>")

    with pytest.raises(MalformedResponseError):
        await validate_address("1600 Amphitheatre Pkwy")


@pytest.mark.asyncio
async def test_validate_address_wrong_shape(httpx_mock):
    httpx_mock.add_response(
        method="POST", url=_ENDPOINT, json={"result": {"verdict": {"addressComplete": "maybe"}}}
    )

    with pytest.raises(MalformedResponseError):
        await validate_address("1600 Amphitheatre Pkwy")


@pytest.mark.asyncio
async def test_validate_address_stores_in_cache(httpx_mock, us_payload):
    httpx_mock.add_response(method="POST", url=_ENDPOINT, json=us_payload)
    cache = InMemoryCache()

    await validate_address("1600 Amphitheatre Pkwy", "US", cache=cache)

    key = ValidationCacheKey.for_request("1600 Amphitheatre Pkwy", "US", False)
    assert cache.sets == [key.render()]
    assert cache.entries[key.render()] == us_payload


@pytest.mark.asyncio
async def test_validate_address_served_from_cache(httpx_mock, us_payload):
    key = ValidationCacheKey.for_request("1600 amphitheatre   pkwy", "us", False)
    cache = InMemoryCache({key.render(): us_payload})

    response = await validate_address("1600 Amphitheatre Pkwy", "US", cache=cache)

    assert response.get_response_id() == us_payload["responseId"]
    assert httpx_mock.get_requests() == []
    assert cache.sets == []


@pytest.mark.asyncio
async def test_usps_flag_is_part_of_cache_key(httpx_mock, us_payload):
    httpx_mock.add_response(method="POST", url=_ENDPOINT, json=us_payload)
    key = ValidationCacheKey.for_request("1600 Amphitheatre Pkwy", "US", False)
    cache = InMemoryCache({key.render(): {"responseId": "without-usps"}})

    response = await validate_address(
        "1600 Amphitheatre Pkwy", "US", ValidationOptions(enable_usps=True), cache=cache
    )
    assert response.get_response_id() == us_payload["responseId"]


@pytest.mark.asyncio
async def test_sequential_validation_bypasses_cache(httpx_mock, us_payload):
    httpx_mock.add_response(method="POST", url=_ENDPOINT, json=us_payload)
    key = ValidationCacheKey.for_request("1600 Amphitheatre Pkwy", "US", False)
    cache = InMemoryCache({key.render(): {"responseId": "stale"}})

    response = await validate_address(
        "1600 Amphitheatre Pkwy",
        "US",
        ValidationOptions(previous_response_id="prev-1"),
        cache=cache,
    )

    assert response.get_response_id() == us_payload["responseId"]
    assert cache.sets == []
    body = json.loads(httpx_mock.get_request().content)
    assert body["previousResponseId"] == "prev-1"
