"""Pet Registry API client.

This module defines a client wrapper around the Pet Registry REST API.
Each server route carries an ``operationId`` equal to the registry
operation name (``createPet``, ``getPetsByBreed``, ...).  The client
can parse an ``openapi.json`` document, either from disk or fetched
from the server, to discover the path and method of every operation.
Operations missing from the document fall back to the built-in default
routes, so the client also works when the specification is
unavailable.

The client exposes one method per registry operation, for example:

* :meth:`create_pet` – register a pet owned by the token's subject.
* :meth:`get_pet` – fetch a single pet by its identifier.
* :meth:`update_pet` – merge a partial update into a pet.
* :meth:`delete_pet` – delete one of the caller's pets.
* :meth:`get_pets_by_breed` – list pets of a breed.
* :meth:`average_age` – average age over all pets.

Every method returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is empty and ``error`` is a dictionary
with keys ``status_code`` and ``message``.

Mutating operations require a bearer token (see ``create_token.py``);
initialise the client with ``api_key='<your token>'``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


@dataclass
class ApiEndpoint:
    """Represents a discovered API endpoint.

    Attributes:
        path: The URI template, e.g. ``/api/v1/pets/{pet_id}``.
        method: The HTTP method in upper case (``GET``, ``POST``, etc.).
        operation_id: Registry operation served by the endpoint.
    """

    path: str
    method: str
    operation_id: Optional[str] = None


class PetRegistryAPI:
    """Client for interacting with the Pet Registry API."""

    # Routes used when an operation is not described by the OpenAPI
    # document.  They mirror the routes of ``api/v1/endpoints/pets.py``.
    _DEFAULT_ENDPOINTS: Dict[str, Tuple[str, str]] = {
        "createPet": ("POST", "/api/v1/pets/"),
        "getAllPets": ("GET", "/api/v1/pets/"),
        "getNumberOfPets": ("GET", "/api/v1/pets/count"),
        "getAverageAgeOfPets": ("GET", "/api/v1/pets/average-age"),
        "getVaccinatedPets": ("GET", "/api/v1/pets/vaccinated"),
        "searchPetsByName": ("GET", "/api/v1/pets/search/by-name"),
        "searchPetsByOwner": ("GET", "/api/v1/pets/search/by-owner"),
        "getPetsByBreed": ("GET", "/api/v1/pets/breed/{breed}"),
        "getPetsByOwner": ("GET", "/api/v1/pets/owner/{owner}"),
        "deletePetsByOwner": ("DELETE", "/api/v1/pets/owner/{owner}"),
        "getPet": ("GET", "/api/v1/pets/{pet_id}"),
        "updatePet": ("PATCH", "/api/v1/pets/{pet_id}"),
        "deletePet": ("DELETE", "/api/v1/pets/{pet_id}"),
        "updateVaccinationStatus": ("PATCH", "/api/v1/pets/{pet_id}/vaccination"),
        "updatePetWeight": ("PATCH", "/api/v1/pets/{pet_id}/weight"),
        "addHealthRecord": ("POST", "/api/v1/pets/{pet_id}/health-record"),
        "updateHealthRecord": ("PUT", "/api/v1/pets/{pet_id}/health-record"),
    }

    def __init__(
        self,
        *,
        base_url: str,
        openapi_path: Optional[str] = None,
        discover: bool = False,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL for the API, e.g. ``http://localhost:8000``.
            openapi_path: Optional path to an OpenAPI JSON file.  If
                provided and readable, endpoints will be inferred from it.
            discover: When ``True`` and no file is given, download
                ``/openapi.json`` from the server and infer endpoints
                from it.
            api_key: Optional bearer token sent in the ``Authorization``
                header of every request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.spec: Dict[str, Any] = {}
        self.endpoints: Dict[str, ApiEndpoint] = {}
        if openapi_path and os.path.exists(openapi_path):
            try:
                with open(openapi_path, "r", encoding="utf-8") as f:
                    self.spec = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(
                    "Failed to load OpenAPI specification %s: %s. Falling back to defaults.",
                    openapi_path,
                    e,
                )
        elif discover:
            data, error = self._request("GET", "/openapi.json")
            if error:
                logger.warning("Failed to fetch OpenAPI specification: %s", error["message"])
            elif isinstance(data, dict):
                self.spec = data
        self._discover_endpoints()
        self._ensure_default_endpoints()

    # ------------------------------------------------------------------
    # OpenAPI discovery
    # ------------------------------------------------------------------
    def _discover_endpoints(self) -> None:
        """Record every operation of the loaded specification.

        Only operations whose ``operationId`` names a known registry
        operation are kept.
        """
        paths = self.spec.get("paths", {})
        for path, methods in paths.items():
            if not isinstance(methods, dict):
                continue
            for method_lower, op in methods.items():
                if not isinstance(op, dict):
                    continue
                operation_id = op.get("operationId")
                if operation_id in self._DEFAULT_ENDPOINTS:
                    self.endpoints[operation_id] = ApiEndpoint(
                        path=path, method=method_lower.upper(), operation_id=operation_id
                    )

    def _ensure_default_endpoints(self) -> None:
        """Fill in default routes for operations the specification lacks."""
        for operation_id, (method, path) in self._DEFAULT_ENDPOINTS.items():
            if operation_id not in self.endpoints:
                self.endpoints[operation_id] = ApiEndpoint(
                    path=path, method=method, operation_id=operation_id
                )

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``, etc.).
            path: Path relative to :attr:`base_url`.
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=15,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    detail = err_json.get("detail") if isinstance(err_json, dict) else None
                    message = detail if isinstance(detail, str) else json.dumps(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _call(
        self,
        operation_id: str,
        *,
        path_params: Dict[str, Any] | None = None,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Invoke a registry operation by name."""
        ep = self.endpoints[operation_id]
        path = ep.path
        for name, value in (path_params or {}).items():
            path = path.replace("{" + name + "}", quote(str(value), safe=""))
        return self._request(ep.method, path, params=params, json_body=json_body)

    def _call_list(self, operation_id: str, **kwargs: Any) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._call(operation_id, **kwargs)
        if error:
            return [], error
        if isinstance(data, list):
            return data, None
        return [], None

    # ------------------------------------------------------------------
    # Record operations
    # ------------------------------------------------------------------
    def create_pet(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Register a new pet.

        Args:
            payload: ``name``, ``breed``, ``age``, ``weight`` and
                optionally ``health_record``, ``vaccination`` and
                ``owner_name``.
        """
        return self._call("createPet", json_body=payload)

    def get_pet(self, pet_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._call("getPet", path_params={"pet_id": pet_id})

    def list_pets(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._call_list("getAllPets")

    def update_pet(self, pet_id: str, updates: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Merge ``updates`` into an existing pet; other fields are kept."""
        return self._call("updatePet", path_params={"pet_id": pet_id}, json_body=updates)

    def delete_pet(self, pet_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Delete one of the caller's pets and return its last value."""
        return self._call("deletePet", path_params={"pet_id": pet_id})

    # ------------------------------------------------------------------
    # Single-field updates
    # ------------------------------------------------------------------
    def update_vaccination_status(self, pet_id: str, status: bool) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._call(
            "updateVaccinationStatus",
            path_params={"pet_id": pet_id},
            json_body={"vaccination": status},
        )

    def update_pet_weight(self, pet_id: str, weight: float) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._call("updatePetWeight", path_params={"pet_id": pet_id}, json_body={"weight": weight})

    def add_health_record(self, pet_id: str, text: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._call("addHealthRecord", path_params={"pet_id": pet_id}, json_body={"text": text})

    def update_health_record(self, pet_id: str, text: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._call("updateHealthRecord", path_params={"pet_id": pet_id}, json_body={"text": text})

    # ------------------------------------------------------------------
    # Owner operations
    # ------------------------------------------------------------------
    def get_pets_by_owner(self, owner: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._call_list("getPetsByOwner", path_params={"owner": owner})

    def search_pets_by_owner(self, text: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._call_list("searchPetsByOwner", params={"q": text})

    def delete_pets_by_owner(self, owner: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._call_list("deletePetsByOwner", path_params={"owner": owner})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_pets_by_breed(self, breed: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._call_list("getPetsByBreed", path_params={"breed": breed})

    def search_pets_by_name(self, text: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._call_list("searchPetsByName", params={"q": text})

    def get_vaccinated_pets(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._call_list("getVaccinatedPets")

    def count_pets(self) -> Tuple[Optional[int], Optional[Error]]:
        data, error = self._call("getNumberOfPets")
        if error:
            return None, error
        return (data or {}).get("count"), None

    def average_age(self) -> Tuple[Optional[float], Optional[Error]]:
        """Average age of all pets; a 404 error means no pets exist."""
        data, error = self._call("getAverageAgeOfPets")
        if error:
            return None, error
        return (data or {}).get("average_age"), None
