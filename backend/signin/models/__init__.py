from signin.models.user import User

__all__ = ["User"]
