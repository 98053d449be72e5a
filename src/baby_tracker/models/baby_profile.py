"""Baby profile data model."""

from pydantic import BaseModel, Field, field_validator


class Profile(BaseModel):
    """Singleton profile, overwritten on edit."""

    name: str = Field(default="Baby", min_length=1, max_length=80, description="Baby's name")

    @field_validator("name", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value
