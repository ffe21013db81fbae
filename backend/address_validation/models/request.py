from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class LanguageOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    return_english_latin_address: bool = False
    language_code: str | None = None

    def to_api(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.return_english_latin_address:
            body["returnEnglishLatinAddress"] = True
        if self.language_code:
            body["languageCode"] = self.language_code
        return body


class ValidationOptions(BaseModel):
    """Per-call options for ``validateAddress``. Built once, never mutated."""

    model_config = ConfigDict(frozen=True)

    enable_usps: bool = False
    language_options: LanguageOptions | None = None
    previous_response_id: str | None = None
    session_token: str | None = None

    @field_validator("language_options", mode="before")
    @classmethod
    def _language_code_shorthand(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"language_code": value}
        return value

    def as_dict(self) -> dict[str, Any]:
        """Options that are actually set."""
        return self.model_dump(exclude_none=True)

    @property
    def is_sequential(self) -> bool:
        """True when the call continues an earlier validation or billing session."""
        return bool(self.previous_response_id or self.session_token)


class ValidationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    address_lines: list[str]
    region_code: str | None = None
    options: ValidationOptions = ValidationOptions()

    def to_api(self) -> dict[str, Any]:
        address: dict[str, Any] = {"addressLines": list(self.address_lines)}
        if self.region_code:
            address["regionCode"] = self.region_code

        body: dict[str, Any] = {"address": address}
        if self.options.enable_usps:
            body["enableUspsCass"] = True
        if self.options.language_options is not None:
            language = self.options.language_options.to_api()
            if language:
                body["languageOptions"] = language
        if self.options.previous_response_id:
            body["previousResponseId"] = self.options.previous_response_id
        if self.options.session_token:
            body["sessionToken"] = self.options.session_token
        return body
