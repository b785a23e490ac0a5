"""
Service layer.

``PetStore`` is the durable id → record map and ``PetService`` the
stateless registry logic built on top of it.  API handlers only talk
to ``PetService``.
"""
