"""
CSS selector construction for form interaction.

Names and values from the command line are embedded in attribute
selectors literally: brackets, quotes and backslashes are escaped so
that a field called "user[remember_me]" matches exactly that name.
"""

from web_reader.session.models import ButtonChoice

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "[": "\\[",
    "]": "\\]",
    "\n": "\\a ",
}


def escape_attribute_value(value: str) -> str:
    """
    Escape a string for use inside a double-quoted attribute selector.

    Example:
        >>> escape_attribute_value("user[remember_me]")
        'user\\\\[remember_me\\\\]'
    """
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def attribute_selector(attribute: str, value: str | None = None) -> str:
    """[attribute] or [attribute="value"]."""
    if value is None:
        return f"[{attribute}]"
    return f'[{attribute}="{escape_attribute_value(value)}"]'


def class_selector(class_name: str) -> str:
    return f".{class_name}"


def form_selector(form_id: str) -> str:
    """The form container, addressed by its id attribute."""
    return attribute_selector("id", form_id)


def _within(form_id: str, targets: list[str]) -> str:
    container = form_selector(form_id)
    return ", ".join(f"{container} {target}" for target in targets)


def field_selector(form_id: str, name: str) -> str:
    """Input or textarea named `name` inside the form."""
    by_name = attribute_selector("name", name)
    return _within(form_id, [f"input{by_name}", f"textarea{by_name}"])


def button_selector(form_id: str, button: ButtonChoice) -> str:
    """
    Button inside the form matching the name, and the value if one is set.

    Matches <button> elements as well as <input type="submit">.
    """
    match = attribute_selector("name", button.name)
    if button.matches_value:
        match += attribute_selector("value", button.value)
    return _within(form_id, [f"button{match}", f'input[type="submit"]{match}'])


def submit_selector(form_id: str) -> str:
    """Generic submit control inside the form."""
    return _within(form_id, ['input[type="submit"]', 'button[type="submit"]'])
