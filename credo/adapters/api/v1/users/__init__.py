from .profile import router

__all__ = ["router"]
