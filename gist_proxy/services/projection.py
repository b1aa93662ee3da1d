"""Decoding and narrowing of the raw GitHub gists payload."""

import json
import logging
import math
from decimal import Decimal
from typing import Any

from gist_proxy.exceptions import GitHubResponseParseError
from gist_proxy.models.schemas import Gist, GistFile

logger = logging.getLogger(__name__)

NIL_TEXT = "<nil>"


def clean_text(text: str) -> str:
    """Replace unpaired surrogates with U+FFFD so the text encodes as UTF-8."""
    try:
        text.encode("utf-8")
        return text
    except UnicodeEncodeError:
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def format_value(value: Any) -> str:
    """
    Render an untyped JSON value as text.

    Absent and null values become ``<nil>``; numbers use the shortest
    round-trip digits, switching to exponent form outside 1e-4 <= |x| < 1e6;
    arrays and objects are rendered as ``[a b]`` and ``map[k:v]``.
    Nesting depth is unbounded, so containers are walked with an explicit stack.
    """
    out: list[str] = []
    # (is_literal, item) pairs, popped from the end
    stack: list[tuple[bool, Any]] = [(False, value)]

    while stack:
        is_literal, item = stack.pop()
        if is_literal:
            out.append(item)
            continue

        if isinstance(item, dict):
            pending: list[tuple[bool, Any]] = [(True, "map[")]
            for i, key in enumerate(sorted(item)):
                if i:
                    pending.append((True, " "))
                pending.append((True, f"{clean_text(key)}:"))
                pending.append((False, item[key]))
            pending.append((True, "]"))
            stack.extend(reversed(pending))
        elif isinstance(item, list):
            pending = [(True, "[")]
            for i, element in enumerate(item):
                if i:
                    pending.append((True, " "))
                pending.append((False, element))
            pending.append((True, "]"))
            stack.extend(reversed(pending))
        else:
            out.append(_format_scalar(item))

    return "".join(out)


def _format_scalar(value: Any) -> str:
    if value is None:
        return NIL_TEXT
    if isinstance(value, str):
        return clean_text(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        try:
            return _format_number(float(value))
        except OverflowError:
            return str(value)
    return str(value)


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    prefix = "-" if sign else ""
    # decimal exponent of the leading digit
    point = exponent + len(digits) - 1

    if point < -4 or point >= 6:
        mantissa = digits[0]
        if len(digits) > 1:
            mantissa += "." + digits[1:]
        exp_sign = "-" if point < 0 else "+"
        return f"{prefix}{mantissa}e{exp_sign}{abs(point):02d}"

    if point < 0:
        return f"{prefix}0.{'0' * (-point - 1)}{digits}"
    if len(digits) <= point + 1:
        return prefix + digits + "0" * (point + 1 - len(digits))
    return f"{prefix}{digits[:point + 1]}.{digits[point + 1:]}"


def project_files(files: Any) -> dict[str, GistFile]:
    """Keep the file entries that are objects with string filename and raw_url."""
    projected: dict[str, GistFile] = {}
    if not isinstance(files, dict):
        return projected

    for name, entry in files.items():
        if not isinstance(entry, dict):
            logger.debug(f"Dropping file entry {name!r}: not an object")
            continue
        filename = entry.get("filename")
        raw_url = entry.get("raw_url")
        if not isinstance(filename, str) or not isinstance(raw_url, str):
            logger.debug(f"Dropping file entry {name!r}: missing filename or raw_url")
            continue
        projected[clean_text(name)] = GistFile(
            filename=clean_text(filename),
            language=format_value(entry.get("language")),
            raw_url=clean_text(raw_url),
        )
    return projected


def project_gist(data: Any) -> Gist:
    """
    Narrow one upstream gist object into a Gist.

    Raises:
        GitHubResponseParseError: If the item is not an object or its
            ``id``/``html_url`` is missing or not a string.
    """
    if not isinstance(data, dict):
        raise GitHubResponseParseError("gist item is not an object")

    gist_id = data.get("id")
    html_url = data.get("html_url")
    if not isinstance(gist_id, str):
        raise GitHubResponseParseError("gist item has no string 'id'")
    if not isinstance(html_url, str):
        raise GitHubResponseParseError(f"gist {gist_id} has no string 'html_url'")

    return Gist(
        id=clean_text(gist_id),
        description=format_value(data.get("description")),
        html_url=clean_text(html_url),
        files=project_files(data.get("files")),
    )


def parse_gists(body: bytes) -> list[Gist]:
    """Decode a raw upstream body into projected gists, in upstream order."""
    try:
        payload = json.loads(body)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and the int digit limit
        raise GitHubResponseParseError(f"invalid JSON: {e!r}") from e

    if payload is None:
        return []
    if not isinstance(payload, list):
        raise GitHubResponseParseError("payload is not an array")

    return [project_gist(item) for item in payload]
