# src/db_navigator/web_interface/routes/navigator_routes.py
import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from db_navigator.config.api_config import ApiConfig
from db_navigator.config.database_config import DatabaseConfig
from db_navigator.core.exceptions.custom_exceptions import (
    NavigatorError,
    InvalidIdentifierError,
    InvalidRequestError,
    NoDataError,
    BackendError
)
from db_navigator.database.gateway import DataGateway
from db_navigator.database.query_builder import SortSpec, ViewRequest
from db_navigator.web_interface.dependencies import get_api_config, get_database_config, get_gateway
from db_navigator.web_interface.models import ErrorResponse, ViewResultResponse

# Get logger
logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def translate_error(error: NavigatorError) -> HTTPException:
    """
    Map a navigator exception to the HTTP error returned to the client.

    The body carries the exception's user message; for backend errors the
    driver or service text goes in ``details``.
    """
    if isinstance(error, (InvalidIdentifierError, InvalidRequestError)):
        logger.warning(f"Rejected request: {error.message}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.get_user_message())

    if isinstance(error, NoDataError):
        logger.info(error.message)
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.get_user_message())

    if isinstance(error, BackendError):
        logger.error(f"Backend error: {error.message} ({error.details})")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": error.get_user_message(), "details": error.details}
        )

    logger.error(f"Unexpected navigator error: {error.message}", exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.get_user_message())


def parse_positive_int(value: str, name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(f"{name} must be a positive integer")
    if number < 1:
        raise InvalidRequestError(f"{name} must be a positive integer")
    return number


def parse_filters(raw: Optional[str]) -> Dict[str, str]:
    """
    Decode the ``filters`` query parameter.

    Args:
        raw (Optional[str]): JSON object of column to substring

    Returns:
        Dict[str, str]: Filters with scalar values as strings

    Raises:
        InvalidRequestError: If the value is not a JSON object of scalars
    """
    if raw is None or not raw.strip():
        return {}

    try:
        decoded = json.loads(raw)
    except ValueError:
        raise InvalidRequestError("Invalid filters format")

    if not isinstance(decoded, dict):
        raise InvalidRequestError("Invalid filters format: expected a JSON object")

    filters = {}
    for column, value in decoded.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            raise InvalidRequestError(f"Invalid filter value for {column!r}: expected a string")
        filters[column] = str(value)
    return filters


@router.get("/databases", response_model=List[Dict[str, Any]], responses=ERROR_RESPONSES)
def list_databases(gateway: DataGateway = Depends(get_gateway)):
    """
    List the databases available on the backend.
    """
    try:
        return gateway.list_databases()
    except NavigatorError as e:
        raise translate_error(e)


@router.get("/tableNames/", include_in_schema=False)
def list_tables_without_database():
    raise translate_error(InvalidRequestError("Database name is required"))


@router.get("/tableNames/{db}", response_model=List[Dict[str, Any]], responses=ERROR_RESPONSES)
def list_tables(db: str, gateway: DataGateway = Depends(get_gateway)):
    """
    List the tables of a database.
    """
    logger.info(f"Fetching tables for database: {db}")
    try:
        return gateway.list_tables(db.strip())
    except NavigatorError as e:
        raise translate_error(e)


@router.get("/rows/{table}/{page}/{page_size}", response_model=ViewResultResponse, responses=ERROR_RESPONSES)
def list_rows(
        table: str,
        page: str,
        page_size: str,
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_direction: Optional[str] = Query(None, alias="sortDirection"),
        filters: Optional[str] = Query(None, description="URL-encoded JSON object of column to substring"),
        db: Optional[str] = Query(None, description="Database holding the table"),
        gateway: DataGateway = Depends(get_gateway),
        api_config: ApiConfig = Depends(get_api_config),
        database_config: DatabaseConfig = Depends(get_database_config)
):
    """
    Get one page of a table with optional sorting and substring filters.
    """
    try:
        page_number = parse_positive_int(page, "Page")
        rows_per_page = parse_positive_int(page_size, "Page size")
        if rows_per_page > api_config.get_max_page_size():
            raise InvalidRequestError(f"Page size must not exceed {api_config.get_max_page_size()}")

        request = ViewRequest(
            table=table,
            page=page_number,
            page_size=rows_per_page,
            sort=SortSpec(sort_by, sort_direction) if sort_by else None,
            filters=parse_filters(filters)
        )

        database = db or database_config.get_default_database()
        if database is None and gateway.backend.name == DatabaseConfig.DIRECT:
            raise InvalidRequestError("Database not selected")

        logger.debug(f"Row request: {request} on database {database}")
        result = gateway.fetch_rows(request, database)
        return ViewResultResponse(**result.to_dict())

    except NavigatorError as e:
        raise translate_error(e)
