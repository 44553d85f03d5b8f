"""Pydantic models for API requests."""

from pydantic import BaseModel, ConfigDict, field_validator


class GenerateRequest(BaseModel):
    # A numeric prompt is taken as its text form.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    latitude: float
    longitude: float
    radius: int
    prompt: str

    @field_validator("latitude", "longitude", "radius", mode="before")
    @classmethod
    def reject_booleans(cls, value):
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        return value
