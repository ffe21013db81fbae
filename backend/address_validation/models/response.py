"""Typed, read-only view over a Google Address Validation API payload.

Every field the service may send is optional. Parsing keeps ``None`` for
absent values; the ``get_*`` / ``is_*`` accessors on
:class:`ValidationResponse` turn absence into a fixed default (``None``,
an empty list or ``False``) so callers never walk the raw dict. A JSON
``null`` is read the same as a missing key.

Values of the wrong type are coerced where pydantic's lax mode has an
unambiguous conversion (``"true"`` -> ``True``, ``"12.5"`` -> ``12.5``);
anything else makes :meth:`ValidationResponse.from_payload` raise
:class:`~address_validation.errors.MalformedResponseError`.
"""

from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from address_validation.errors import MalformedResponseError


class Granularity(str, Enum):
    unspecified = "GRANULARITY_UNSPECIFIED"
    sub_premise = "SUB_PREMISE"
    premise = "PREMISE"
    premise_proximity = "PREMISE_PROXIMITY"
    block = "BLOCK"
    route = "ROUTE"
    other = "OTHER"


class _PayloadModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _null_is_absent(cls, data: Any) -> Any:
        # JSON null means "not sent"; let the field default apply
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Verdict(_PayloadModel):
    input_granularity: Granularity | None = None
    validation_granularity: Granularity | None = None
    geocode_granularity: Granularity | None = None
    address_complete: bool | None = None
    has_unconfirmed_components: bool | None = None
    has_inferred_components: bool | None = None
    has_replaced_components: bool | None = None

    @field_validator(
        "input_granularity", "validation_granularity", "geocode_granularity", mode="before"
    )
    @classmethod
    def _unknown_granularity_is_other(cls, value: Any) -> Any:
        # New enum values from the service should not break parsing
        if isinstance(value, str) and value not in Granularity._value2member_map_:
            return Granularity.other
        return value


class ComponentName(_PayloadModel):
    text: str | None = None
    language_code: str | None = None


class AddressComponent(_PayloadModel):
    component_name: ComponentName | None = None
    component_type: str | None = None
    confirmation_level: str | None = None
    inferred: bool = False
    spell_corrected: bool = False
    replaced: bool = False
    unexpected: bool = False


class PostalAddress(_PayloadModel):
    revision: int | None = None
    region_code: str | None = None
    language_code: str | None = None
    postal_code: str | None = None
    sorting_code: str | None = None
    administrative_area: str | None = None
    locality: str | None = None
    sublocality: str | None = None
    address_lines: list[str] = Field(default_factory=list)
    recipients: list[str] = Field(default_factory=list)
    organization: str | None = None


class Address(_PayloadModel):
    formatted_address: str | None = None
    postal_address: PostalAddress | None = None
    address_components: list[AddressComponent] = Field(default_factory=list)
    missing_component_types: list[str] = Field(default_factory=list)
    unconfirmed_component_types: list[str] = Field(default_factory=list)
    unresolved_tokens: list[str] = Field(default_factory=list)


class LatLng(_PayloadModel):
    latitude: float | None = None
    longitude: float | None = None


class PlusCode(_PayloadModel):
    global_code: str | None = None
    compound_code: str | None = None


class Viewport(_PayloadModel):
    low: LatLng | None = None
    high: LatLng | None = None


class Geocode(_PayloadModel):
    location: LatLng | None = None
    plus_code: PlusCode | None = None
    bounds: Viewport | None = None
    feature_size_meters: float | None = None
    place_id: str | None = None
    place_types: list[str] = Field(default_factory=list)


class Metadata(_PayloadModel):
    business: bool | None = None
    po_box: bool | None = None
    residential: bool | None = None


class UspsAddress(_PayloadModel):
    first_address_line: str | None = None
    firm: str | None = None
    second_address_line: str | None = None
    urbanization: str | None = None
    city_state_zip_address_line: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    zip_code_extension: str | None = None


class UspsData(_PayloadModel):
    standardized_address: UspsAddress | None = None
    delivery_point_code: str | None = None
    delivery_point_check_digit: str | None = None
    dpv_confirmation: str | None = None
    dpv_footnote: str | None = None
    dpv_cmra: str | None = None
    dpv_vacant: str | None = None
    dpv_no_stat: str | None = None
    carrier_route: str | None = None
    carrier_route_indicator: str | None = None
    ews_no_match: bool | None = None
    post_office_city: str | None = None
    post_office_state: str | None = None
    abbreviated_city: str | None = None
    fips_county_code: str | None = None
    county: str | None = None
    elot_number: str | None = None
    elot_flag: str | None = None
    lacs_link_return_code: str | None = None
    lacs_link_indicator: str | None = None
    po_box_only_postal_code: bool | None = None
    suitelink_footnote: str | None = None
    pmb_designator: str | None = None
    pmb_number: str | None = None
    address_record_type: str | None = None
    default_address: bool | None = None
    error_message: str | None = None
    cass_processed: bool | None = None


class ValidationResult(_PayloadModel):
    verdict: Verdict | None = None
    address: Address | None = None
    geocode: Geocode | None = None
    metadata: Metadata | None = None
    usps_data: UspsData | None = None
    english_latin_address: Address | None = None


class ValidationResponse(_PayloadModel):
    response_id: str | None = None
    result: ValidationResult = Field(default_factory=ValidationResult)

    _raw: dict[str, Any] | None = PrivateAttr(default=None)

    @classmethod
    def from_payload(cls, data: Any) -> "ValidationResponse":
        """Parse a decoded ``validateAddress`` JSON body."""
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object, got {type(data).__name__}"
            )
        try:
            response = cls.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(str(exc)) from exc
        response._raw = data
        return response

    def get_all(self) -> dict[str, Any]:
        if self._raw is not None:
            return self._raw
        return self.model_dump(by_alias=True, exclude_none=True)

    def get_response_id(self) -> str | None:
        return self.response_id

    # Verdict

    def get_verdict(self) -> Verdict | None:
        return self.result.verdict

    def get_input_granularity(self) -> Granularity | None:
        verdict = self.result.verdict
        return verdict.input_granularity if verdict else None

    def get_validation_granularity(self) -> Granularity | None:
        verdict = self.result.verdict
        return verdict.validation_granularity if verdict else None

    def get_geocode_granularity(self) -> Granularity | None:
        verdict = self.result.verdict
        return verdict.geocode_granularity if verdict else None

    def is_address_complete(self) -> bool:
        verdict = self.result.verdict
        return bool(verdict and verdict.address_complete)

    def has_unconfirmed_components(self) -> bool:
        verdict = self.result.verdict
        return bool(verdict and verdict.has_unconfirmed_components)

    def has_inferred_components(self) -> bool:
        verdict = self.result.verdict
        return bool(verdict and verdict.has_inferred_components)

    def has_replaced_components(self) -> bool:
        verdict = self.result.verdict
        return bool(verdict and verdict.has_replaced_components)

    # Address

    def get_formatted_address(self) -> str | None:
        address = self.result.address
        return address.formatted_address if address else None

    def get_postal_address(self) -> PostalAddress | None:
        address = self.result.address
        return address.postal_address if address else None

    def get_address_components(self) -> list[AddressComponent]:
        address = self.result.address
        return list(address.address_components) if address else []

    def get_address_component(self, component_type: str) -> AddressComponent | None:
        """Return the first component of ``component_type``, in payload order."""
        for component in self.get_address_components():
            if component.component_type == component_type:
                return component
        return None

    def get_missing_component_types(self) -> list[str]:
        address = self.result.address
        return list(address.missing_component_types) if address else []

    def get_unconfirmed_component_types(self) -> list[str]:
        address = self.result.address
        return list(address.unconfirmed_component_types) if address else []

    def get_unresolved_tokens(self) -> list[str]:
        address = self.result.address
        return list(address.unresolved_tokens) if address else []

    # Geocode

    def get_geocode(self) -> LatLng | None:
        """Geocoded location, or None unless both coordinates are present."""
        geocode = self.result.geocode
        location = geocode.location if geocode else None
        if location is None or location.latitude is None or location.longitude is None:
            return None
        return location

    def get_plus_code(self) -> PlusCode | None:
        geocode = self.result.geocode
        return geocode.plus_code if geocode else None

    def get_viewport(self) -> Viewport | None:
        geocode = self.result.geocode
        return geocode.bounds if geocode else None

    def get_feature_size_meters(self) -> float | None:
        geocode = self.result.geocode
        return geocode.feature_size_meters if geocode else None

    def get_place_id(self) -> str | None:
        geocode = self.result.geocode
        return geocode.place_id if geocode else None

    def get_place_types(self) -> list[str]:
        geocode = self.result.geocode
        return list(geocode.place_types) if geocode else []

    # Metadata

    def get_metadata(self) -> Metadata | None:
        return self.result.metadata

    def is_business(self) -> bool:
        metadata = self.result.metadata
        return bool(metadata and metadata.business)

    def is_po_box(self) -> bool:
        metadata = self.result.metadata
        return bool(metadata and metadata.po_box)

    def is_residential(self) -> bool:
        metadata = self.result.metadata
        return bool(metadata and metadata.residential)

    # USPS

    def get_usps_data(self) -> UspsData | None:
        return self.result.usps_data

    def get_usps_standardized_address(self) -> UspsAddress | None:
        usps = self.result.usps_data
        return usps.standardized_address if usps else None

    def get_delivery_point_code(self) -> str | None:
        usps = self.result.usps_data
        return usps.delivery_point_code if usps else None

    def get_carrier_route(self) -> str | None:
        usps = self.result.usps_data
        return usps.carrier_route if usps else None

    def get_dpv_confirmation(self) -> str | None:
        usps = self.result.usps_data
        return usps.dpv_confirmation if usps else None

    def is_commercial_mail_receiver(self) -> bool:
        usps = self.result.usps_data
        return bool(usps and usps.dpv_cmra == "Y")

    def is_vacant(self) -> bool:
        usps = self.result.usps_data
        return bool(usps and usps.dpv_vacant == "Y")

    def is_active(self) -> bool:
        usps = self.result.usps_data
        return bool(usps and usps.dpv_no_stat == "N")

    def get_english_latin_address(self) -> Address | None:
        return self.result.english_latin_address

    def get_standardized_address(self) -> dict[str, Any]:
        postal = self.get_postal_address() or PostalAddress()
        return {
            "address_lines": list(postal.address_lines),
            "administrative_area": postal.administrative_area,
            "language_code": postal.language_code,
            "locality": postal.locality,
            "postal_code": postal.postal_code,
            "region_code": postal.region_code,
            "sorting_code": postal.sorting_code,
            "sublocality": postal.sublocality,
            "formatted_address": self.get_formatted_address(),
        }
