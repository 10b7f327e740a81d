"""
Bond server configuration. Values come from the environment with local defaults.
Issuer and API audience are public identifiers, not secrets.
"""
import os

# Relational store for bonds (SQLite for development; any SQLAlchemy URL works)
DATABASE_URL = os.environ.get("BOND_DATABASE_URL", "sqlite:///./bond_server.db")

# Authorization Server that issues access tokens; we fetch JWKS and validate iss against it
ISSUER = os.environ.get("OAUTH_ISSUER", "http://127.0.0.1:9000").rstrip("/")

# This API's audience; access tokens must include this in aud
API_AUDIENCE = os.environ.get("OAUTH_API_AUDIENCE", "http://127.0.0.1:7000")

JWKS_URI = os.environ.get("OAUTH_JWKS_URI", f"{ISSUER}/.well-known/jwks.json")

# How long PyJWKClient keeps the fetched key set (seconds)
JWKS_CACHE_SECONDS = int(os.environ.get("BOND_JWKS_CACHE_SECONDS", "300"))

# Upper bound for title and author
MAX_TEXT_LENGTH = int(os.environ.get("BOND_MAX_TEXT_LENGTH", "255"))

# Server-side status assigned on create: 0 == draft, 1 == active
STATUS_ACTIVE = 1
