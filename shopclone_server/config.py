"""Runtime settings loaded from the environment."""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = "http://localhost:8000"


class Settings(BaseModel):
    """Storefront client settings."""

    backend_url: str = Field(default=DEFAULT_BACKEND_URL, description="Base URL of the storefront backend")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    customer_name: str = Field(default="Guest", description="Customer name placed on orders")
    customer_email: str = Field(default="guest@example.com", description="Customer email placed on orders")
    customer_address: str = Field(default="123 Demo St, Web City", description="Address placed on orders")

    @classmethod
    def from_env(cls, backend_url: Optional[str] = None) -> "Settings":
        """
        Build settings from SHOPCLONE_* environment variables.

        Args:
            backend_url: Explicit backend URL, overrides SHOPCLONE_BACKEND_URL

        Returns:
            Settings instance
        """
        values: dict[str, str] = {}
        env_map = {
            "backend_url": "SHOPCLONE_BACKEND_URL",
            "timeout": "SHOPCLONE_TIMEOUT",
            "customer_name": "SHOPCLONE_CUSTOMER_NAME",
            "customer_email": "SHOPCLONE_CUSTOMER_EMAIL",
            "customer_address": "SHOPCLONE_CUSTOMER_ADDRESS",
        }
        for field, var in env_map.items():
            value = os.environ.get(var)
            if value:
                values[field] = value

        if backend_url:
            values["backend_url"] = backend_url

        settings = cls(**values)
        logger.info(f"Backend URL: {settings.backend_url}")
        return settings
