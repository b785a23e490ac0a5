"""
Business logic for the pet registry.

``PetService`` implements every registry operation on top of a
``PetStore``: validation, identifier and timestamp assignment, merge
updates, ownership checks on deletion and the derived read-only
queries (filters, searches and aggregates).

The service keeps no state of its own.  Its coroutines never await
while they work with the store, so on a single event loop each
operation runs to completion before the next one starts; multi-record
operations such as ``delete_pets_by_owner`` rely on that.  A host that
calls the service from several threads must serialise the calls.
"""

import logging
import math
import time
import uuid
from typing import Any, Callable, Dict, List

from pet_registry_api.app.core.errors import (
    NoDataError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from pet_registry_api.app.schemas.pet import Pet, PetCreate, PetUpdate
from pet_registry_api.app.services.pet_store import PetStore


logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("name", "breed")
_POSITIVE_FIELDS = ("age", "weight")


class PetService:
    """Registry operations over a ``PetStore``.

    Parameters
    ----------
    store : PetStore
        Where the records live.
    clock : Callable[[], int]
        Source of the current time in nanoseconds since the epoch.
    strict_validation : bool
        When ``False`` the value checks on create/update payloads are
        skipped and records are stored as supplied.
    """

    def __init__(
        self,
        store: PetStore,
        clock: Callable[[], int] = time.time_ns,
        strict_validation: bool = True,
    ) -> None:
        self.store = store
        self.clock = clock
        self.strict_validation = strict_validation

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    def _validate_fields(self, fields: Dict[str, Any]) -> None:
        # Non-finite numbers cannot be stored as JSON, so they are refused
        # even in permissive mode.
        for name in _POSITIVE_FIELDS:
            if name in fields and not math.isfinite(fields[name]):
                raise ValidationError(f"{name.capitalize()} must be a finite number.")
        if not self.strict_validation:
            return
        for name in _TEXT_FIELDS:
            if name in fields and not str(fields[name]).strip():
                raise ValidationError(f"Field '{name}' must not be empty.")
        for name in _POSITIVE_FIELDS:
            if name in fields and fields[name] <= 0:
                raise ValidationError(f"{name.capitalize()} must be greater than zero.")

    def _require_id(self, pet_id: str) -> None:
        if self.strict_validation and not (pet_id and pet_id.strip()):
            raise ValidationError(f"Invalid id={pet_id!r}.")

    def _get_existing(self, pet_id: str) -> Pet:
        self._require_id(pet_id)
        pet = self.store.get(pet_id)
        if pet is None:
            raise NotFoundError(f"Pet with id={pet_id} not found.")
        return pet

    def _touch(self, pet: Pet, changes: Dict[str, Any]) -> Pet:
        """Apply ``changes`` to a copy of ``pet``, stamp it and store it.

        The store is written only after the new record is complete, so
        a rejected write leaves the previous version in place.
        """
        stamp = max(self.clock(), pet.created_at)
        updated = pet.model_copy(update={**changes, "updated_at": stamp})
        self.store.insert(updated.id, updated)
        return updated

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    async def create_pet(self, payload: PetCreate, caller: str) -> Pet:
        """Register a new pet owned by ``caller`` and return it."""
        if not caller:
            raise ValidationError("Caller identity is required.")
        self._validate_fields(payload.model_dump())
        pet = Pet(
            id=str(uuid.uuid4()),
            owner=caller,
            created_at=self.clock(),
            updated_at=None,
            **payload.model_dump(),
        )
        self.store.insert(pet.id, pet)
        logger.info("Caller %s registered pet %s (%s)", caller, pet.id, pet.name)
        return pet

    async def get_pet(self, pet_id: str) -> Pet:
        """Return the pet stored under ``pet_id``."""
        return self._get_existing(pet_id)

    async def list_pets(self) -> List[Pet]:
        """Return every stored pet."""
        return self.store.values()

    async def update_pet(self, pet_id: str, updates: PetUpdate) -> Pet:
        """Merge the supplied fields into an existing pet.

        Fields left out of ``updates`` (or sent as ``null``) keep their
        stored values.  ``id``, ``owner`` and ``created_at`` are never
        changed.
        """
        pet = self._get_existing(pet_id)
        changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        self._validate_fields(changes)
        updated = self._touch(pet, changes)
        logger.info("Pet %s updated with fields: %s", pet_id, sorted(changes))
        return updated

    async def delete_pet(self, pet_id: str, caller: str) -> Pet:
        """Remove a pet owned by ``caller`` and return its last value."""
        pet = self._get_existing(pet_id)
        if pet.owner != caller:
            logger.warning("Caller %s tried to delete pet %s owned by %s", caller, pet_id, pet.owner)
            raise UnauthorizedError("User does not have the right to delete pet.")
        self.store.remove(pet_id)
        logger.info("Pet %s deleted by its owner", pet_id)
        return pet

    # ------------------------------------------------------------------
    # Single-field updates
    # ------------------------------------------------------------------
    async def update_vaccination_status(self, pet_id: str, status: bool) -> Pet:
        pet = self._get_existing(pet_id)
        updated = self._touch(pet, {"vaccination": status})
        logger.info("Pet %s vaccination status set to %s", pet_id, status)
        return updated

    async def update_pet_weight(self, pet_id: str, weight: float) -> Pet:
        pet = self._get_existing(pet_id)
        self._validate_fields({"weight": weight})
        updated = self._touch(pet, {"weight": weight})
        logger.info("Pet %s weight set to %s", pet_id, weight)
        return updated

    async def add_health_record(self, pet_id: str, text: str) -> Pet:
        """Append ``text`` as a new line of the pet's health record."""
        pet = self._get_existing(pet_id)
        record = f"{pet.health_record}\n{text}" if pet.health_record else text
        updated = self._touch(pet, {"health_record": record})
        logger.info("Health record entry added to pet %s", pet_id)
        return updated

    async def update_health_record(self, pet_id: str, text: str) -> Pet:
        """Replace the pet's health record with ``text``."""
        pet = self._get_existing(pet_id)
        updated = self._touch(pet, {"health_record": text})
        logger.info("Health record of pet %s replaced", pet_id)
        return updated

    # ------------------------------------------------------------------
    # Owner scoped operations
    # ------------------------------------------------------------------
    async def get_pets_by_owner(self, owner: str) -> List[Pet]:
        return [pet for pet in self.store.values() if pet.owner == owner]

    async def search_pets_by_owner(self, text: str) -> List[Pet]:
        """Case-insensitive substring search on the owner display name.

        Pets registered without a display name are matched on the owner
        identity instead.
        """
        needle = text.lower()
        return [
            pet for pet in self.store.values()
            if needle in (pet.owner_name or pet.owner).lower()
        ]

    async def delete_pets_by_owner(self, owner: str, caller: str) -> List[Pet]:
        """Remove every pet of ``owner`` and return the removed records.

        Only the owner may clear their own pets.
        """
        if owner != caller:
            logger.warning("Caller %s tried to delete all pets of %s", caller, owner)
            raise UnauthorizedError("User does not have the right to delete these pets.")
        removed = [pet for pet in self.store.values() if pet.owner == owner]
        self.store.remove_many(pet.id for pet in removed)
        logger.info("Deleted %d pets of owner %s", len(removed), owner)
        return removed

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------
    async def get_pets_by_breed(self, breed: str) -> List[Pet]:
        return [pet for pet in self.store.values() if pet.breed == breed]

    async def search_pets_by_name(self, text: str) -> List[Pet]:
        needle = text.lower()
        return [pet for pet in self.store.values() if needle in pet.name.lower()]

    async def get_vaccinated_pets(self) -> List[Pet]:
        return [pet for pet in self.store.values() if pet.vaccination]

    async def count_pets(self) -> int:
        return self.store.size()

    async def average_age(self) -> float:
        """Mean age over all pets.

        Raises ``NoDataError`` when the store is empty.
        """
        pets = self.store.values()
        if not pets:
            raise NoDataError("No pets registered; average age is undefined.")
        return sum(pet.age for pet in pets) / len(pets)
