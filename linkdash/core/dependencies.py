from __future__ import annotations

from fastapi import Request

from linkdash.core.config import Settings
from linkdash.infrastructure.store import DashboardStore
from linkdash.services.links_api import LinkApiClient

# Collaborators are built once by create_app() and hung off app.state.


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DashboardStore:
    return request.app.state.store


def get_link_client(request: Request) -> LinkApiClient:
    return request.app.state.link_client
