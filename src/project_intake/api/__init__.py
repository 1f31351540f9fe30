"""HTTP transport for the marketplace API."""

from project_intake.api.client import ApiClient, TokenProvider, build_client

__all__ = ["ApiClient", "TokenProvider", "build_client"]
