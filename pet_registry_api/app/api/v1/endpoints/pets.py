"""
Pet endpoints for API v1.

Every registry operation is exposed as one route whose
``operation_id`` is the operation name (``createPet``,
``getPetsByBreed`` and so on), which is what ``PetRegistryAPI`` looks
up in the OpenAPI document.  Mutating operations use POST, PUT, PATCH
or DELETE and require a bearer token; queries use GET and are public.

Registry failures are translated into HTTP errors:

* ``ValidationError`` → 422
* ``NotFoundError`` and ``NoDataError`` → 404
* ``UnauthorizedError`` → 403
* ``StorageError`` → 507
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from pet_registry_api.app.core.errors import (
    NoDataError,
    NotFoundError,
    RegistryError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from pet_registry_api.app.core.security import get_caller_identity
from pet_registry_api.app.schemas.pet import (
    AverageAge,
    HealthRecordEntry,
    Pet,
    PetCount,
    PetCreate,
    PetUpdate,
    VaccinationUpdate,
    WeightUpdate,
)
from pet_registry_api.app.services.pet_service import PetService


router = APIRouter()

_STATUS_BY_ERROR = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    NoDataError: status.HTTP_404_NOT_FOUND,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    StorageError: status.HTTP_507_INSUFFICIENT_STORAGE,
}


def _http_error(error: RegistryError) -> HTTPException:
    code = _STATUS_BY_ERROR.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=code, detail=error.message)


def get_pet_service(request: Request) -> PetService:
    """Dependency returning the service created by ``create_app``."""
    return request.app.state.pet_service


@router.post("/", response_model=Pet, status_code=status.HTTP_201_CREATED, operation_id="createPet")
async def create_pet(
    payload: PetCreate,
    caller: str = Depends(get_caller_identity),
    service: PetService = Depends(get_pet_service),
) -> Pet:
    """Register a new pet owned by the authenticated caller."""
    try:
        return await service.create_pet(payload, caller)
    except RegistryError as e:
        raise _http_error(e) from e


@router.get("/", response_model=List[Pet], operation_id="getAllPets")
async def list_pets(service: PetService = Depends(get_pet_service)) -> List[Pet]:
    """List every registered pet ordered by id."""
    return await service.list_pets()


@router.get("/count", response_model=PetCount, operation_id="getNumberOfPets")
async def count_pets(service: PetService = Depends(get_pet_service)) -> PetCount:
    return PetCount(count=await service.count_pets())


@router.get("/average-age", response_model=AverageAge, operation_id="getAverageAgeOfPets")
async def average_age(service: PetService = Depends(get_pet_service)) -> AverageAge:
    """Mean age of all registered pets.

    Returns 404 when no pets are registered.
    """
    try:
        value = await service.average_age()
    except RegistryError as e:
        raise _http_error(e) from e
    return AverageAge(average_age=value, count=await service.count_pets())


@router.get("/vaccinated", response_model=List[Pet], operation_id="getVaccinatedPets")
async def vaccinated_pets(service: PetService = Depends(get_pet_service)) -> List[Pet]:
    return await service.get_vaccinated_pets()


@router.get("/search/by-name", response_model=List[Pet], operation_id="searchPetsByName")
async def search_by_name(
    q: str = Query(..., description="Case-insensitive part of the pet name"),
    service: PetService = Depends(get_pet_service),
) -> List[Pet]:
    return await service.search_pets_by_name(q)


@router.get("/search/by-owner", response_model=List[Pet], operation_id="searchPetsByOwner")
async def search_by_owner(
    q: str = Query(..., description="Case-insensitive part of the owner display name"),
    service: PetService = Depends(get_pet_service),
) -> List[Pet]:
    return await service.search_pets_by_owner(q)


@router.get("/breed/{breed}", response_model=List[Pet], operation_id="getPetsByBreed")
async def pets_by_breed(breed: str, service: PetService = Depends(get_pet_service)) -> List[Pet]:
    return await service.get_pets_by_breed(breed)


@router.get("/owner/{owner}", response_model=List[Pet], operation_id="getPetsByOwner")
async def pets_by_owner(owner: str, service: PetService = Depends(get_pet_service)) -> List[Pet]:
    return await service.get_pets_by_owner(owner)


@router.delete("/owner/{owner}", response_model=List[Pet], operation_id="deletePetsByOwner")
async def delete_pets_by_owner(
    owner: str,
    caller: str = Depends(get_caller_identity),
    service: PetService = Depends(get_pet_service),
) -> List[Pet]:
    """Delete all pets of ``owner``.  Only the owner may do this."""
    try:
        return await service.delete_pets_by_owner(owner, caller)
    except RegistryError as e:
        raise _http_error(e) from e


@router.get("/{pet_id}", response_model=Pet, operation_id="getPet")
async def get_pet(pet_id: str, service: PetService = Depends(get_pet_service)) -> Pet:
    try:
        return await service.get_pet(pet_id)
    except RegistryError as e:
        raise _http_error(e) from e


@router.patch("/{pet_id}", response_model=Pet, operation_id="updatePet")
async def update_pet(
    pet_id: str,
    updates: PetUpdate,
    caller: str = Depends(get_caller_identity),
    service: PetService = Depends(get_pet_service),
) -> Pet:
    """Update an existing pet.

    Partial updates are supported; any unspecified fields remain
    unchanged.
    """
    try:
        return await service.update_pet(pet_id, updates)
    except RegistryError as e:
        raise _http_error(e) from e


@router.delete("/{pet_id}", response_model=Pet, operation_id="deletePet")
async def delete_pet(
    pet_id: str,
    caller: str = Depends(get_caller_identity),
    service: PetService = Depends(get_pet_service),
) -> Pet:
    """Delete a pet and return its last stored value (owner only)."""
    try:
        return await service.delete_pet(pet_id, caller)
    except RegistryError as e:
        raise _http_error(e) from e


@router.patch("/{pet_id}/vaccination", response_model=Pet, operation_id="updateVaccinationStatus")
async def update_vaccination_status(
    pet_id: str,
    body: VaccinationUpdate,
    caller: str = Depends(get_caller_identity),
    service: PetService = Depends(get_pet_service),
) -> Pet:
    try:
        return await service.update_vaccination_status(pet_id, body.vaccination)
    except RegistryError as e:
        raise _http_error(e) from e


@router.patch("/{pet_id}/weight", response_model=Pet, operation_id="updatePetWeight")
async def update_pet_weight(
    pet_id: str,
    body: WeightUpdate,
    caller: str = Depends(get_caller_identity),
    service: PetService = Depends(get_pet_service),
) -> Pet:
    try:
        return await service.update_pet_weight(pet_id, body.weight)
    except RegistryError as e:
        raise _http_error(e) from e


@router.post("/{pet_id}/health-record", response_model=Pet, operation_id="addHealthRecord")
async def add_health_record(
    pet_id: str,
    entry: HealthRecordEntry,
    caller: str = Depends(get_caller_identity),
    service: PetService = Depends(get_pet_service),
) -> Pet:
    """Append a line to the pet's health record."""
    try:
        return await service.add_health_record(pet_id, entry.text)
    except RegistryError as e:
        raise _http_error(e) from e


@router.put("/{pet_id}/health-record", response_model=Pet, operation_id="updateHealthRecord")
async def update_health_record(
    pet_id: str,
    entry: HealthRecordEntry,
    caller: str = Depends(get_caller_identity),
    service: PetService = Depends(get_pet_service),
) -> Pet:
    """Replace the pet's health record."""
    try:
        return await service.update_health_record(pet_id, entry.text)
    except RegistryError as e:
        raise _http_error(e) from e
