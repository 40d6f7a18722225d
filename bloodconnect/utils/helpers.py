from flask import current_app, flash
from bloodconnect.utils.api import ApiError, SessionExpired


def fetch_or_default(call, default, message):
    """
    Run a read call. On failure show ``message`` as a banner and fall back to
    ``default``; an expired session is re-raised for the app-level handler.
    """
    try:
        return call()
    except SessionExpired:
        raise
    except ApiError as e:
        current_app.logger.warning(f"{message}: {e.message}")
        flash(message, 'danger')
        return default


def apply_field_errors(form, field_errors, mapping=None):
    """Attach backend field errors to form fields. Returns the errors no field claimed."""
    mapping = mapping or {}
    unclaimed = {}
    for name, messages in (field_errors or {}).items():
        field = form._fields.get(mapping.get(name, name))
        if field is None:
            unclaimed[name] = messages
            continue
        field.errors = list(field.errors) + list(messages)
    return unclaimed
