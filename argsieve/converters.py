"""
Stock converters for Specification(type=...).

A converter takes the raw string and returns the typed value, raising
ValueError (ConversionError) with a user-facing message when the string is not
acceptable. The matcher turns that message into "Argument <id>: <message>".
"""
from .faults import ConversionError
from .utils import rename


def integer(raw, /):
    """
    Parse an integer, tolerating "," thousands separators ("12,345" -> 12345).
    """
    try:
        return int(raw.replace(",", ""))
    except (AttributeError, ValueError):
        raise ConversionError("Invalid parameter \"%s\"" % raw) from None


def bounded(converter, /, *, minimum=None, maximum=None):
    """
    Wrap a converter so the converted value must lie within [minimum, maximum].

        count = registry.add("--count", type=bounded(integer, minimum=1))
    """
    if not callable(converter):
        raise TypeError("bounded() first argument must be callable")

    def wrapper(raw, /):
        value = converter(raw)
        if minimum is not None and value < minimum:
            raise ConversionError("%s is less than %s." % (value, minimum))
        if maximum is not None and value > maximum:
            raise ConversionError("%s is greater than %s." % (value, maximum))
        return value

    return rename(wrapper, "bounded(%s)" % getattr(converter, "__name__", "converter"))


__all__ = (
    "integer",
    "bounded",
)
