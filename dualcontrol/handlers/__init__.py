"""Action handlers for DualControl.

Each handler validates and executes one action type.
"""

from .base import ActionHandler, ExecutionResult, HandlerMetadata
from .registry import HandlerRegistry, create_default_registry
from .create_user import CreateUserHandler
from .create_account import CreateAccountHandler
from .create_promotion import CreatePromotionHandler

__all__ = [
    "ActionHandler",
    "ExecutionResult",
    "HandlerMetadata",
    "HandlerRegistry",
    "create_default_registry",
    "CreateUserHandler",
    "CreateAccountHandler",
    "CreatePromotionHandler",
]
