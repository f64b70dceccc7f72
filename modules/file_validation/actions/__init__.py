"""
Built-in actions.

All actions are automatically registered via decorators.
"""

# Import all actions to trigger registration
from modules.file_validation.actions import file_actions

__all__ = ['file_actions']
