"""FastAPI dependency providers: read from app.state, set by create_app()."""

from fastapi import Request

from data.catalog_session import CatalogSession


def get_catalog_session(request: Request) -> CatalogSession:
    """CatalogSession owning the current snapshot."""
    return request.app.state.catalog_session


def get_web_config(request: Request):
    """WebConfig instance."""
    return request.app.state.web_config


def get_catalog_config(request: Request):
    """CatalogConfig instance."""
    return request.app.state.catalog_config
