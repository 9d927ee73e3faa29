"""
Data Models Module

Pydantic models for the auxiliary endpoints. The proxy endpoint itself
passes arbitrary JSON through and has no request/response model.
"""

from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    credential_configured: bool = Field(..., description="Whether the UptimeRobot API key is set")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Check timestamp",
    )


class ServiceInfo(BaseModel):
    """Root endpoint response model."""
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    description: str = Field(..., description="Short service description")
    endpoints: Dict[str, str] = Field(..., description="Available endpoints")
