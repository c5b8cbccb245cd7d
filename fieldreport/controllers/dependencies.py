"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from fieldreport.config.dependencies import ReportServices


def get_services(request: Request) -> ReportServices:
    """Return the service container built at startup."""

    return request.app.state.services


ServicesDep = Annotated[ReportServices, Depends(get_services)]


__all__ = ["get_services", "ServicesDep"]
