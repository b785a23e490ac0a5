"""
Main entrypoint for the Pet Registry API.

This module assembles the FastAPI application, sets up logging, builds
the record store and registry service, and includes versioned
routers.  The ``create_app`` function builds and configures the app,
which is then instantiated at module import time as ``app``::

    uvicorn pet_registry_api.app.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI

from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router
from .services.pet_service import PetService
from .services.pet_store import PetStore


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the module-level settings
        read from environment variables.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.  The registry
        service is available as ``app.state.pet_service``.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that the store setup
    # below can log.
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    store = PetStore(
        settings.database_url,
        max_key_size=settings.max_key_size,
        max_value_size=settings.max_value_size,
    )
    app.state.settings = settings
    app.state.pet_service = PetService(store, strict_validation=settings.strict_validation)
    logging.getLogger(__name__).info(
        "Pet registry ready (database=%s, strict_validation=%s)",
        settings.database_url,
        settings.strict_validation,
    )

    app.include_router(v1_router, prefix="/api/v1")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
