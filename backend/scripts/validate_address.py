"""Validate one address against the live Google Address Validation API.

Run::

    python -m scripts.validate_address "1600 Amphitheatre Pkwy, Mountain View, CA" --region US --usps

Requires ``ADDRESS_VALIDATION_API_KEY``. Exit status: 0 when the address
is valid, 1 when it is not, 2 when the API could not be reached.
"""

import argparse
import asyncio
import logging
import sys

from address_validation.cache.keys import RedisValidationCache
from address_validation.errors import AddressValidationError
from address_validation.models.request import LanguageOptions, ValidationOptions
from address_validation.services import google_validation, scoring

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("address", help="Address; use \\n to separate lines")
    parser.add_argument("--region", default=None, help="CLDR region code, e.g. US")
    parser.add_argument("--usps", action="store_true", help="Request USPS CASS data")
    parser.add_argument("--language", default=None, help="Preferred response language")
    parser.add_argument("--no-cache", action="store_true", help="Bypass the Redis cache")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    options = ValidationOptions(
        enable_usps=args.usps,
        language_options=LanguageOptions(language_code=args.language) if args.language else None,
    )
    cache = None if args.no_cache else RedisValidationCache()

    try:
        response = await google_validation.validate_address(
            args.address.replace("\\n", "\n"), args.region, options, cache=cache,
        )
    except ValueError as exc:
        logger.error("Invalid address: %s", exc)
        return 2
    except AddressValidationError as exc:
        logger.error("Validation failed: %s", exc)
        return 2

    report = scoring.build_report(response)

    print("=" * 60)
    print(report.formatted_address or "(no formatted address)")
    print("=" * 60)
    print(f"  score:      {report.score}")
    print(f"  rating:     {report.rating.value}")
    print(f"  confidence: {report.validity.confidence_level.value}")
    if report.latitude is not None:
        print(f"  location:   {report.latitude}, {report.longitude}")
    print()
    for name, value in report.classification.model_dump().items():
        icon = "+" if value else "-"
        print(f"  {icon} {name}")
    print()
    for issue in report.validity.issues:
        print(f"  ! {issue}")

    if report.validity.is_valid:
        print("RESULT: VALID")
        return 0
    print("RESULT: INVALID")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
