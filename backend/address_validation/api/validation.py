import logging

from fastapi import APIRouter, HTTPException, Query

from address_validation.cache.keys import RedisValidationCache, ValidationCacheKey
from address_validation.errors import (
    AddressValidationError,
    ApiKeyMissingError,
    MalformedResponseError,
)
from address_validation.models.report import ValidationReport
from address_validation.models.request import LanguageOptions, ValidationOptions
from address_validation.services import google_validation, scoring

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/address", tags=["address"])


def get_cache() -> RedisValidationCache:
    return RedisValidationCache()


@router.get("/validate", response_model=ValidationReport)
async def validate(
    address: str = Query(..., min_length=2, description="Address, lines separated by newlines"),
    region_code: str | None = Query(None, min_length=2, max_length=2, description="CLDR region code"),
    usps: bool = Query(False, description="Request USPS CASS data (US and PR only)"),
    language_code: str | None = Query(None, description="Preferred response language"),
    previous_response_id: str | None = Query(None),
    session_token: str | None = Query(None),
):
    """Validate an address with Google and return its score, rating and classification."""
    options = ValidationOptions(
        enable_usps=usps,
        language_options=LanguageOptions(language_code=language_code) if language_code else None,
        previous_response_id=previous_response_id,
        session_token=session_token,
    )

    try:
        response = await google_validation.validate_address(
            address, region_code, options, cache=get_cache(),
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ApiKeyMissingError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except MalformedResponseError as exc:
        logger.warning("Malformed validation payload: %s", exc)
        raise HTTPException(
            status_code=502, detail="Address Validation API returned an unexpected payload"
        ) from exc
    except AddressValidationError as exc:
        raise HTTPException(
            status_code=502, detail=f"Address Validation API unavailable: {exc}"
        ) from exc

    return scoring.build_report(response)


@router.delete("/validate/cache")
async def invalidate_cached_validation(
    address: str = Query(..., min_length=2),
    region_code: str | None = Query(None, min_length=2, max_length=2),
    usps: bool = Query(False),
):
    """Drop the cached validation response for one address."""
    key = ValidationCacheKey.for_request(address, region_code, usps)
    deleted = await get_cache().invalidate(key)
    return {"deleted": deleted}


@router.delete("/validate/cache/all")
async def invalidate_all_validations():
    """Drop every cached validation response."""
    deleted = await get_cache().invalidate_all()
    return {"deleted": deleted}
