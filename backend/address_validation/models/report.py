from enum import Enum

from pydantic import BaseModel, Field


class Rating(str, Enum):
    excellent = "Excellent"
    good = "Good"
    fair = "Fair"
    poor = "Poor"


class ConfidenceLevel(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"
    very_low = "very_low"


class ValidityCheck(BaseModel):
    is_valid: bool
    confidence_level: ConfidenceLevel
    issues: list[str] = Field(default_factory=list)


class AddressClassification(BaseModel):
    is_verified: bool = False
    is_fully_validated: bool = False
    is_high_confidence: bool = False
    has_minimal_components: bool = False
    is_standardized: bool = False
    is_exact_match: bool = False
    is_verification_needed: bool = False
    is_deliverable: bool = False
    is_shippable: bool = False
    is_valid_landmark: bool = False
    is_us_address: bool = False
    is_business: bool = False
    is_po_box: bool = False
    is_residential: bool = False
    is_active: bool = False
    is_vacant: bool = False
    is_commercial_mail_receiver: bool = False


class ValidationReport(BaseModel):
    response_id: str | None = None
    formatted_address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    score: int = Field(ge=0, le=100)
    rating: Rating
    validity: ValidityCheck
    classification: AddressClassification
    missing_component_types: list[str] = Field(default_factory=list)
    unconfirmed_component_types: list[str] = Field(default_factory=list)
