"""
Application package initializer.

The project is organised into small pieces: ``core`` holds
configuration, logging, persistence and authentication helpers,
``schemas`` the pydantic payloads, ``services`` the record store and
the registry logic, and ``api`` the versioned HTTP routers.

The ASGI application lives in ``main`` and is not imported here, so
that importing a helper module (for example from ``create_token.py``)
does not open the database.
"""
