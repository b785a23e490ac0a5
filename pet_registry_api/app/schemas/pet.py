"""
Pydantic models for pet records.

``PetBase`` contains the fields a caller supplies; ``PetCreate`` is the
registration payload and ``Pet`` the stored record returned by every
operation.  ``PetUpdate`` carries optional fields for merge updates,
and the small single-field bodies back the targeted update routes.

Weights must be finite numbers in every mode.  Value rules (non-blank
names, positive age and weight) are checked by
``PetService`` rather than here, because they can be relaxed through
the ``strict_validation`` setting.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PetBase(BaseModel):
    name: str = Field(..., examples=["Rex"])
    breed: str = Field(..., examples=["Beagle"])
    age: int = Field(..., examples=[3])
    weight: float = Field(..., examples=[12.5], allow_inf_nan=False)
    health_record: str = Field("", examples=["Dewormed in March"])
    vaccination: bool = Field(False, examples=[False])
    owner_name: Optional[str] = Field(
        None,
        examples=["Alice Smith"],
        description="Display name of the owner; the owner identity itself comes from the bearer token",
    )


class PetCreate(PetBase):
    """Schema for registering a pet."""
    pass


class Pet(PetBase):
    """A stored pet record.

    ``owner`` is the caller identity that registered the pet.
    Timestamps are nanoseconds since the UNIX epoch; ``updated_at``
    stays ``None`` until the first mutation.
    """

    id: str
    owner: str
    created_at: int
    updated_at: Optional[int] = None

    model_config = {
        "from_attributes": True,
    }


class PetUpdate(BaseModel):
    """Schema for updating a pet.

    All fields are optional; only provided fields will be updated.
    """
    name: str | None = None
    breed: str | None = None
    age: int | None = None
    weight: float | None = Field(None, allow_inf_nan=False)
    health_record: str | None = None
    vaccination: bool | None = None
    owner_name: str | None = None


class VaccinationUpdate(BaseModel):
    vaccination: bool = Field(..., examples=[True])


class WeightUpdate(BaseModel):
    weight: float = Field(..., examples=[13.2], allow_inf_nan=False)


class HealthRecordEntry(BaseModel):
    text: str = Field(..., examples=["Annual checkup, all clear"])


class PetCount(BaseModel):
    count: int


class AverageAge(BaseModel):
    average_age: float
    count: int
