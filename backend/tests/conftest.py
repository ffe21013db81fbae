import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import address_validation.cache.redis as cache_module
from address_validation.main import app


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def us_payload() -> dict:
    """A clean USPS-confirmed US residential address, as returned by validateAddress."""
    return {
        "responseId": "a1b2c3d4-0000-4000-8000-000000000001",
        "result": {
            "verdict": {
                "inputGranularity": "PREMISE",
                "validationGranularity": "PREMISE",
                "geocodeGranularity": "PREMISE",
                "addressComplete": True,
            },
            "address": {
                "formattedAddress": "1600 Amphitheatre Parkway, Mountain View, CA 94043-1351, USA",
                "postalAddress": {
                    "regionCode": "US",
                    "languageCode": "en",
                    "postalCode": "94043-1351",
                    "administrativeArea": "CA",
                    "locality": "Mountain View",
                    "addressLines": ["1600 Amphitheatre Pkwy"],
                },
                "addressComponents": [
                    {
                        "componentName": {"text": "1600"},
                        "componentType": "street_number",
                        "confirmationLevel": "CONFIRMED",
                    },
                    {
                        "componentName": {"text": "Amphitheatre Parkway", "languageCode": "en"},
                        "componentType": "route",
                        "confirmationLevel": "CONFIRMED",
                        "spellCorrected": True,
                    },
                    {
                        "componentName": {"text": "Mountain View", "languageCode": "en"},
                        "componentType": "locality",
                        "confirmationLevel": "CONFIRMED",
                    },
                    {
                        "componentName": {"text": "CA", "languageCode": "en"},
                        "componentType": "administrative_area_level_1",
                        "confirmationLevel": "CONFIRMED",
                    },
                    {
                        "componentName": {"text": "94043"},
                        "componentType": "postal_code",
                        "confirmationLevel": "CONFIRMED",
                    },
                    {
                        "componentName": {"text": "USA", "languageCode": "en"},
                        "componentType": "country",
                        "confirmationLevel": "CONFIRMED",
                    },
                ],
            },
            "geocode": {
                "location": {"latitude": 37.4223878, "longitude": -122.0841877},
                "plusCode": {"globalCode": "849VCWC8+X8"},
                "bounds": {
                    "low": {"latitude": 37.4220699, "longitude": -122.084958},
                    "high": {"latitude": 37.4226618, "longitude": -122.0829302},
                },
                "featureSizeMeters": 5.5,
                "placeId": "ChIJF4Yf2Ry7j4AR__1AkytDyAE",
                "placeTypes": ["premise"],
            },
            "metadata": {"business": False, "poBox": False, "residential": True},
            "uspsData": {
                "standardizedAddress": {
                    "firstAddressLine": "1600 AMPHITHEATRE PKWY",
                    "cityStateZipAddressLine": "MOUNTAIN VIEW CA 94043-1351",
                    "city": "MOUNTAIN VIEW",
                    "state": "CA",
                    "zipCode": "94043",
                    "zipCodeExtension": "1351",
                },
                "deliveryPointCode": "00",
                "deliveryPointCheckDigit": "0",
                "dpvConfirmation": "Y",
                "dpvFootnote": "AABB",
                "dpvCmra": "N",
                "dpvVacant": "N",
                "dpvNoStat": "N",
                "carrierRoute": "C909",
                "carrierRouteIndicator": "D",
                "postOfficeCity": "MOUNTAIN VIEW",
                "postOfficeState": "CA",
                "fipsCountyCode": "085",
                "county": "SANTA CLARA",
                "cassProcessed": True,
            },
        },
    }


@pytest.fixture(autouse=True)
def reset_cache_state():
    cache_module._circuit_open_until = 0.0
    cache_module._pool = None
    yield
    cache_module._circuit_open_until = 0.0
    cache_module._pool = None
