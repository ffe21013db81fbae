import asyncio
import logging

import httpx

from address_validation.cache.keys import ValidationCache, ValidationCacheKey
from address_validation.config import settings
from address_validation.errors import (
    ApiError,
    ApiKeyMissingError,
    MalformedResponseError,
    TransportError,
)
from address_validation.models.request import ValidationOptions, ValidationRequest
from address_validation.models.response import ValidationResponse

logger = logging.getLogger(__name__)

_client: httpx.AsyncClient | None = None
_client_loop_id: int | None = None


def _get_client() -> httpx.AsyncClient:
    global _client, _client_loop_id
    loop_id = id(asyncio.get_running_loop())
    if _client is None or _client.is_closed or _client_loop_id != loop_id:
        _client = httpx.AsyncClient(timeout=httpx.Timeout(settings.request_timeout, connect=4.0))
        _client_loop_id = loop_id
    return _client


def _address_lines(address: str | list[str]) -> list[str]:
    lines = address.splitlines() if isinstance(address, str) else list(address)
    lines = [line.strip() for line in lines if line and line.strip()]
    if not lines:
        raise ValueError("Address must contain at least one non-empty line")
    return lines


def build_request(
    address: str | list[str],
    region_code: str | None = None,
    options: ValidationOptions | None = None,
) -> ValidationRequest:
    """Assemble a validateAddress request from caller input."""
    return ValidationRequest(
        address_lines=_address_lines(address),
        region_code=region_code.strip().upper() if region_code else None,
        options=options or ValidationOptions(),
    )


def build_request_body(
    address: str | list[str],
    region_code: str | None = None,
    options: ValidationOptions | None = None,
) -> dict:
    return build_request(address, region_code, options).to_api()


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.reason_phrase or "Unknown error"
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return resp.reason_phrase or "Unknown error"


async def _fetch(request: ValidationRequest) -> dict:
    if not settings.api_key:
        raise ApiKeyMissingError()

    client = _get_client()
    try:
        resp = await client.post(
            f"{settings.api_base}:validateAddress",
            params={"key": settings.api_key},
            json=request.to_api(),
        )
    except httpx.HTTPError as exc:
        raise TransportError(f"Address Validation API unreachable: {exc}") from exc

    if resp.is_error:
        message = _error_message(resp)
        logger.warning("validateAddress failed status=%d message=%s", resp.status_code, message)
        raise ApiError(resp.status_code, message)

    try:
        data = resp.json()
    except ValueError as exc:
        raise MalformedResponseError("Response body is not valid JSON") from exc
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


async def validate_address(
    address: str | list[str],
    region_code: str | None = None,
    options: ValidationOptions | None = None,
    *,
    cache: ValidationCache | None = None,
) -> ValidationResponse:
    """Validate an address, serving repeated lookups from ``cache`` when given.

    Calls that continue a session (previous response id or session token)
    always go to the API.
    """
    request = build_request(address, region_code, options)
    use_cache = cache is not None and not request.options.is_sequential
    key = ValidationCacheKey.for_request(
        request.address_lines, request.region_code, request.options.enable_usps
    )

    if use_cache:
        cached = await cache.get(key)
        if cached is not None:
            logger.info("validation cache_hit key=%s", key.render())
            return ValidationResponse.from_payload(cached)

    data = await _fetch(request)
    response = ValidationResponse.from_payload(data)

    if use_cache:
        await cache.set(key, data)
        logger.info("validation cache_set key=%s", key.render())
    return response
