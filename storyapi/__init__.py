"""Story and blog CRUD backend with refresh token issuance."""

__version__ = "0.1.0"
