"""
API I/O schemas.

Request and response contracts for every router, kept separate from the
SQLModel entities so storage details (JSON text columns, hashes) never leak
into the API.
"""
