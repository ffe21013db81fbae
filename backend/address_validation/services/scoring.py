"""Score, rating and classification of an Address Validation response.

Everything here is a pure function of a parsed
:class:`~address_validation.models.response.ValidationResponse`: no I/O,
no state, and no exceptions for a well-typed response. An address that
fails validation is described by a low score and failing predicates.
"""

from address_validation.models.report import (
    AddressClassification,
    ConfidenceLevel,
    Rating,
    ValidationReport,
    ValidityCheck,
)
from address_validation.models.response import Granularity, ValidationResponse

# Factor weights; they add up to 100.
WEIGHT_COMPLETE = 30
WEIGHT_CONFIRMED = 20
WEIGHT_NOT_INFERRED = 15
WEIGHT_NOT_REPLACED = 10
WEIGHT_GEOCODE = 10
WEIGHT_POSTAL_CODE = 5
WEIGHT_PRECISE_LOCATION = 5
WEIGHT_USPS = 5

# Feature sizes below this are treated as building-level precision.
PRECISE_FEATURE_SIZE_METERS = 10.0

DPV_CONFIRMED = "Y"

HIGH_CONFIDENCE_SCORE = 75
VERIFICATION_SCORE = 50
MIN_VALID_SCORE = 50

_RATING_THRESHOLDS: list[tuple[int, Rating]] = [
    (90, Rating.excellent),
    (75, Rating.good),
    (50, Rating.fair),
]

_CONFIDENCE_BY_RATING: dict[Rating, ConfidenceLevel] = {
    Rating.excellent: ConfidenceLevel.high,
    Rating.good: ConfidenceLevel.medium,
    Rating.fair: ConfidenceLevel.low,
    Rating.poor: ConfidenceLevel.very_low,
}

# ROUTE or finer counts as a verified match.
VERIFIED_GRANULARITIES: frozenset[Granularity] = frozenset(
    {
        Granularity.sub_premise,
        Granularity.premise,
        Granularity.premise_proximity,
        Granularity.block,
        Granularity.route,
    }
)

REQUIRED_COMPONENT_TYPES: tuple[str, ...] = (
    "route",
    "locality",
    "administrative_area_level_1",
    "postal_code",
)

LANDMARK_PLACE_TYPES: frozenset[str] = frozenset(
    {
        "point_of_interest",
        "establishment",
        "landmark",
        "tourist_attraction",
        "natural_feature",
        "park",
        "airport",
        "museum",
        "stadium",
    }
)


def _component_flag_clear(flag: bool | None, address_complete: bool) -> bool:
    # The service drops false verdict flags from the JSON, so an absent flag
    # only counts as clear when the verdict also reports a complete address.
    if flag is None:
        return address_complete
    return not flag


def _postal_code(response: ValidationResponse) -> str | None:
    postal = response.get_postal_address()
    return postal.postal_code if postal else None


def _has_usps_bonus(response: ValidationResponse) -> bool:
    return (
        is_us_address(response)
        and response.get_usps_data() is not None
        and response.get_dpv_confirmation() == DPV_CONFIRMED
    )


def get_score(response: ValidationResponse) -> int:
    """Weighted 0-100 quality score. Each factor earns its full weight or nothing."""
    verdict = response.get_verdict()
    complete = response.is_address_complete()

    score = 0
    if complete:
        score += WEIGHT_COMPLETE
    if verdict is not None:
        if _component_flag_clear(verdict.has_unconfirmed_components, complete):
            score += WEIGHT_CONFIRMED
        if _component_flag_clear(verdict.has_inferred_components, complete):
            score += WEIGHT_NOT_INFERRED
        if _component_flag_clear(verdict.has_replaced_components, complete):
            score += WEIGHT_NOT_REPLACED

    if response.get_geocode() is not None:
        score += WEIGHT_GEOCODE
    if _postal_code(response):
        score += WEIGHT_POSTAL_CODE

    feature_size = response.get_feature_size_meters()
    if feature_size is not None and feature_size < PRECISE_FEATURE_SIZE_METERS:
        score += WEIGHT_PRECISE_LOCATION

    if _has_usps_bonus(response):
        score += WEIGHT_USPS

    return max(0, min(100, score))


def get_rating(score: int) -> Rating:
    for threshold, rating in _RATING_THRESHOLDS:
        if score >= threshold:
            return rating
    return Rating.poor


def rate(response: ValidationResponse) -> Rating:
    return get_rating(get_score(response))


# Classification predicates


def is_verified(response: ValidationResponse) -> bool:
    return response.get_validation_granularity() in VERIFIED_GRANULARITIES


def is_fully_validated(response: ValidationResponse) -> bool:
    return (
        response.is_address_complete()
        and not response.has_unconfirmed_components()
        and not response.has_inferred_components()
    )


def is_high_confidence(response: ValidationResponse) -> bool:
    return get_score(response) >= HIGH_CONFIDENCE_SCORE


def missing_required_components(response: ValidationResponse) -> list[str]:
    """Required component types that are absent or reported missing, in fixed order."""
    reported_missing = set(response.get_missing_component_types())
    return [
        component_type
        for component_type in REQUIRED_COMPONENT_TYPES
        if component_type in reported_missing
        or response.get_address_component(component_type) is None
    ]


def has_minimal_components(response: ValidationResponse) -> bool:
    return not missing_required_components(response)


is_minimal_valid = has_minimal_components


def is_standardized(response: ValidationResponse) -> bool:
    return bool(response.get_formatted_address()) and not response.has_replaced_components()


def is_exact_match(response: ValidationResponse) -> bool:
    return not response.has_inferred_components() and not response.has_replaced_components()


def is_verification_needed(response: ValidationResponse) -> bool:
    return response.has_unconfirmed_components() or get_score(response) < VERIFICATION_SCORE


def is_us_address(response: ValidationResponse) -> bool:
    return response.get_standardized_address()["region_code"] == "US"


def is_deliverable(response: ValidationResponse) -> bool:
    if is_us_address(response):
        return response.get_dpv_confirmation() == DPV_CONFIRMED
    return is_fully_validated(response)


def is_shippable(response: ValidationResponse) -> bool:
    # PO boxes still receive parcels, only vacancy rules an address out.
    return is_deliverable(response) and not is_vacant(response)


def is_valid_landmark(response: ValidationResponse) -> bool:
    return not LANDMARK_PLACE_TYPES.isdisjoint(response.get_place_types())


def is_business(response: ValidationResponse) -> bool:
    return response.is_business()


def is_po_box(response: ValidationResponse) -> bool:
    return response.is_po_box()


def is_residential(response: ValidationResponse) -> bool:
    return response.is_residential()


def is_active(response: ValidationResponse) -> bool:
    return response.is_active()


def is_vacant(response: ValidationResponse) -> bool:
    return response.is_vacant()


def is_commercial_mail_receiver(response: ValidationResponse) -> bool:
    return response.is_commercial_mail_receiver()


def check_validity(response: ValidationResponse) -> ValidityCheck:
    score = get_score(response)

    issues: list[str] = []
    if not response.is_address_complete():
        issues.append("Incomplete address")
    if response.has_unconfirmed_components():
        issues.append("Address has unconfirmed components")
    if response.has_inferred_components():
        issues.append("Address has inferred components")
    if response.has_replaced_components():
        issues.append("Address has replaced components")
    missing = missing_required_components(response)
    if missing:
        issues.append(f"Missing required components: {', '.join(missing)}")
    if response.get_geocode() is None:
        issues.append("No geocode available")

    return ValidityCheck(
        is_valid=is_fully_validated(response) or score >= MIN_VALID_SCORE,
        confidence_level=_CONFIDENCE_BY_RATING[get_rating(score)],
        issues=issues,
    )


def classify(response: ValidationResponse) -> AddressClassification:
    return AddressClassification(
        is_verified=is_verified(response),
        is_fully_validated=is_fully_validated(response),
        is_high_confidence=is_high_confidence(response),
        has_minimal_components=has_minimal_components(response),
        is_standardized=is_standardized(response),
        is_exact_match=is_exact_match(response),
        is_verification_needed=is_verification_needed(response),
        is_deliverable=is_deliverable(response),
        is_shippable=is_shippable(response),
        is_valid_landmark=is_valid_landmark(response),
        is_us_address=is_us_address(response),
        is_business=is_business(response),
        is_po_box=is_po_box(response),
        is_residential=is_residential(response),
        is_active=is_active(response),
        is_vacant=is_vacant(response),
        is_commercial_mail_receiver=is_commercial_mail_receiver(response),
    )


def build_report(response: ValidationResponse) -> ValidationReport:
    score = get_score(response)
    location = response.get_geocode()
    return ValidationReport(
        response_id=response.get_response_id(),
        formatted_address=response.get_formatted_address(),
        latitude=location.latitude if location else None,
        longitude=location.longitude if location else None,
        score=score,
        rating=get_rating(score),
        validity=check_validity(response),
        classification=classify(response),
        missing_component_types=response.get_missing_component_types(),
        unconfirmed_component_types=response.get_unconfirmed_component_types(),
    )
