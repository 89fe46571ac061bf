"""Pydantic schemas for API responses."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union
from datetime import datetime


class UrlRecordResponse(BaseModel):
    """A stored URL record."""

    id: str = Field(..., description="Record id (UUID)")
    shortCode: str = Field(..., description="Unique short code")
    longUrl: str = Field(..., description="The original long URL")
    createdAt: Optional[datetime] = Field(None, description="Creation timestamp")
    updatedAt: Optional[datetime] = Field(None, description="Last edit timestamp")


class Envelope(BaseModel):
    """Every JSON response is wrapped in this envelope."""

    code: str = Field(..., description="Symbolic status code")
    message: Union[str, List[Dict[str, Any]]] = Field(
        ..., description="Human readable message or list of validation issues"
    )
    data: Optional[Union[UrlRecordResponse, List[UrlRecordResponse]]] = Field(
        None, description="Record or list of records"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "SUCCESSFUL_CREATED_URL",
                    "message": "URL was shortened successfully",
                    "data": {
                        "id": "5f0c2b53-7f2a-4f0e-9d4b-3c1f7a2e9b10",
                        "shortCode": "aB3_x9",
                        "longUrl": "https://example.com/very/long/path",
                        "createdAt": "2024-01-01T12:00:00+00:00",
                        "updatedAt": None,
                    },
                }
            ]
        }
    }


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")
