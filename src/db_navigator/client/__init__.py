# src/db_navigator/client/__init__.py
from db_navigator.client.api_client import NavigatorApiClient
from db_navigator.client.navigator import Navigator
from db_navigator.client.view_state import SortConfig, TableView, ViewStatus

__all__ = [
    'NavigatorApiClient',
    'Navigator',
    'SortConfig',
    'TableView',
    'ViewStatus'
]
