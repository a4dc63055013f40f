from .backend_interface import BackendStrategy

__all__ = ['BackendStrategy']
