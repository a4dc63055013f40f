# src/db_navigator/web_interface/models.py
from typing import Dict, Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ViewResultResponse(BaseModel):
    """One page of table rows with pagination totals."""
    model_config = ConfigDict(populate_by_name=True)

    rows: List[Dict[str, Any]] = Field(..., description="Rows of the requested page")
    total_count: int = Field(..., ge=0, alias="totalCount", description="Rows matching the filters")
    current_page: int = Field(..., ge=1, alias="currentPage", description="Page number (starting from 1)")
    total_pages: int = Field(..., ge=0, alias="totalPages", description="Number of pages")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    api_version: str
    backend: str
