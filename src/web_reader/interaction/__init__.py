"""
Interaction module for web-reader.

Drives a loaded page on behalf of the caller:
- Phoenix LiveView detection and connection waiting
- Form filling and submission
- Injected script execution with navigation waiting
- The orchestrator sequencing a whole run
"""

from web_reader.interaction.selectors import (
    escape_attribute_value,
    field_selector,
    button_selector,
    submit_selector,
    form_selector,
)
from web_reader.interaction.framework import FrameworkDetector
from web_reader.interaction.forms import FormSubmitter
from web_reader.interaction.scripting import ScriptCoordinator
from web_reader.interaction.orchestrator import Orchestrator, SessionFactory

__all__ = [
    # Selectors
    "escape_attribute_value",
    "field_selector",
    "button_selector",
    "submit_selector",
    "form_selector",
    # Components
    "FrameworkDetector",
    "FormSubmitter",
    "ScriptCoordinator",
    "Orchestrator",
    "SessionFactory",
]
