#!/usr/bin/env python3
"""
Run script for the Field Report backend
"""
import uvicorn

from fieldreport.config.settings import settings

if __name__ == "__main__":
    uvicorn.run(
        "fieldreport.main:get_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
