"""Error formatting utilities.

Turns exceptions raised by the RPC client into short messages for the
status tooltip, and into full reports for the log.
"""

import json
import traceback
from typing import Any


def format_error(error: Any) -> str:
    """Format an error as the single-line message shown to the user.

    Falls back to the exception class name when the message is empty, so
    the tooltip never ends in a bare colon.
    """
    if isinstance(error, BaseException):
        message = str(error).strip()
        if message:
            return message
        return error.__class__.__name__

    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message

    return format_unknown_error(error)


def format_unknown_error(error: Any) -> str:
    """Format any error into a string representation.

    Handles Exception objects, serializable objects, and primitives.
    """
    if isinstance(error, BaseException):
        if error.__traceback__:
            return ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        return f"{error.__class__.__name__}: {str(error)}"

    if isinstance(error, (dict, list)):
        try:
            return json.dumps(error, indent=2)
        except (TypeError, ValueError):
            return "Unexpected error (unserializable)"

    return str(error)
