"""Structured header parameter splitting on top of :mod:`email`."""

from __future__ import annotations

from email.message import Message
from email.utils import collapse_rfc2231_value

_PARAMETER_HEADER = "X-Parameters"


def split_header_parameters(header_value: str) -> dict[str, str]:
    """Split ``name=value; name=value`` into a dict.

    The value is parsed like the parameter list of a MIME header, so quoting,
    backslash escapes and RFC 2231 encoded values are handled by
    :meth:`email.message.Message.get_params`.  Line breaks from header
    folding are dropped first.  Names come back lower-cased, values stripped
    and unquoted.  Bare tokens and empty values are ignored and a repeated
    name keeps its last value.
    """
    holder = Message()
    holder[_PARAMETER_HEADER] = header_value.replace("\r", "").replace("\n", "")

    parameters: dict[str, str] = {}
    for name, value in holder.get_params(failobj=[], header=_PARAMETER_HEADER):
        if isinstance(value, tuple):
            value = collapse_rfc2231_value(value)
        if name and value:
            parameters[name] = value
    return parameters


__all__ = ["split_header_parameters"]
