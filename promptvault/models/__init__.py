from .user import User
from .prompt import Prompt

__all__ = ["User", "Prompt"]
