"""
Helpers for multipart form submissions (blog editor).
"""

_TRUE_VALUES = ('1', 'true', 'on', 'yes')


def form_flag(form, name):
    """Checkbox-style flag; None when the field was not sent."""
    if name not in form:
        return None
    return form.get(name, '').strip().lower() in _TRUE_VALUES


def form_payload(form, fields, flags=()):
    """Build a camelCase payload from the submitted form fields."""
    payload = {}
    for name in fields:
        if name in form:
            payload[name] = form.get(name)
    for name in flags:
        value = form_flag(form, name)
        if value is not None:
            payload[name] = value
    return payload
