"""
Built-in rules.

Contains the built-in rule vocabulary organized by namespace:
- required_rules: Required-determiners (required, sometimes, required_with, required_if)
- file_rules: Validators for values and uploaded files

All rules are automatically registered via decorators.
"""

# Import all rules to trigger registration
from modules.file_validation.rules import required_rules
from modules.file_validation.rules import file_rules

__all__ = ['required_rules', 'file_rules']
