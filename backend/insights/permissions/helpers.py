# Overview: Lookups over the permission registry.

from .definitions import PERMISSION_DEFINITIONS


_BY_CODE = {
    code: {"code": code, "name": name, "description": description, "category": category}
    for code, name, description, category in PERMISSION_DEFINITIONS
}


def get_permission_definition(code):
    """Registry entry for a code as a new dict, or None when unregistered."""
    definition = _BY_CODE.get(code)
    return dict(definition) if definition else None


def validate_permission_code(code):
    return code in _BY_CODE
