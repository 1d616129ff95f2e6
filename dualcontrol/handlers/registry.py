"""Handler registry for action type dispatch.

A registry is an explicit instance built once at startup and handed to the
workflow engine; there is no module-level singleton.
"""

import logging
from typing import Dict, Iterable, List, Optional

from dualcontrol.core.workflow.errors import UnknownActionTypeError
from .base import ActionHandler

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Maps action type identifiers to their handlers."""

    def __init__(self, handlers: Optional[Iterable[ActionHandler]] = None):
        self._handlers: Dict[str, ActionHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: ActionHandler) -> None:
        """Register a handler under its action type.

        Args:
            handler: ActionHandler instance to register
        """
        action_type = handler.action_type
        if not action_type:
            raise ValueError(f"{type(handler).__name__} does not declare an action_type")
        if action_type in self._handlers:
            logger.warning(f"Overwriting existing handler for action type: {action_type}")
        self._handlers[action_type] = handler
        logger.debug(f"Registered action handler: {action_type}")

    def get_handler(self, action_type: str) -> Optional[ActionHandler]:
        """Get handler by action type, or None if not registered."""
        return self._handlers.get(action_type)

    def resolve(self, action_type: str) -> ActionHandler:
        """Get handler by action type.

        Raises:
            UnknownActionTypeError: If no handler is registered for the type
        """
        handler = self._handlers.get(action_type)
        if handler is None:
            raise UnknownActionTypeError(action_type)
        return handler

    def list_action_types(self) -> List[str]:
        """List all registered action types."""
        return list(self._handlers.keys())

    def describe(self) -> List[Dict[str, str]]:
        """Discovery metadata for every registered action type.

        Returns:
            List of dicts with action_type, name, description and category
        """
        described = []
        for action_type, handler in self._handlers.items():
            metadata = handler.metadata
            if metadata is None:
                described.append({
                    "action_type": action_type,
                    "name": action_type.replace("_", " ").title(),
                    "description": f"Action type: {action_type}",
                    "category": "General",
                })
                continue
            described.append({
                "action_type": action_type,
                "name": metadata.name,
                "description": metadata.description,
                "category": metadata.category,
            })
        return described

    def __contains__(self, action_type: str) -> bool:
        return action_type in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


def create_default_registry() -> HandlerRegistry:
    """Registry populated with the built-in action handlers."""
    # Import handlers here to avoid circular imports
    from .create_account import CreateAccountHandler
    from .create_promotion import CreatePromotionHandler
    from .create_user import CreateUserHandler

    return HandlerRegistry([
        CreateUserHandler(),
        CreateAccountHandler(),
        CreatePromotionHandler(),
    ])
