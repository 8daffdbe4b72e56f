"""CGI-style web handler.

The web front end asks for a map with a GET request such as
``/mapgen?-p=village`` and shows the response body as a base64 PNG
``data:`` URL. Query keys accept the long field name, the short command
line flag, or the flag with its leading dashes. Dashes inside a key read as
underscores, so ``--road-count`` and ``road_count`` are the same key:

    preset                      p   -p
    width                       w   W   -w   -W
    height                      h   H   -h   -H
    roads, road_count           r   -r
    road_width                  R   -R
    buildings, building_count   b   -b
    building_size               B   -B
    seed                        s   -s
    max_steps
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TextIO
from urllib.parse import parse_qsl

from battlemapper import config
from battlemapper.environment.generators.session import GenerationSession
from battlemapper.environment.generators.themes import THEMES, ThemeRegistry
from battlemapper.errors import BattleMapperError, InvalidRequest
from battlemapper.render.png import encode_base64, render_image
from battlemapper.types import RandomSeed

logger = logging.getLogger(__name__)

_HTTP_REASONS = {200: "OK", 400: "Bad Request"}

# Query key -> (request field, converter)
_QUERY_KEYS: dict[str, tuple[str, type]] = {
    "preset": ("preset", str),
    "p": ("preset", str),
    "width": ("width", int),
    "w": ("width", int),
    "W": ("width", int),
    "height": ("height", int),
    "h": ("height", int),
    "H": ("height", int),
    "roads": ("road_count", int),
    "road_count": ("road_count", int),
    "r": ("road_count", int),
    "road_width": ("road_width", int),
    "R": ("road_width", int),
    "buildings": ("building_count", int),
    "building_count": ("building_count", int),
    "b": ("building_count", int),
    "building_size": ("building_max_size", int),
    "B": ("building_max_size", int),
    "seed": ("seed", str),
    "s": ("seed", str),
    "max_steps": ("max_steps", int),
}


@dataclass(frozen=True)
class WebResponse:
    """A minimal HTTP response.

    Attributes:
        status: HTTP status code (200 or 400).
        content_type: MIME type of ``body``.
        body: Base64 PNG text on success, a plain error message otherwise.
    """

    status: int
    content_type: str
    body: str

    @property
    def ok(self) -> bool:
        return self.status == 200

    def to_cgi(self) -> str:
        """Format the response as CGI output (headers, blank line, body)."""
        reason = _HTTP_REASONS.get(self.status, "")
        return (
            f"Status: {self.status} {reason}\r\n"
            f"Content-Type: {self.content_type}\r\n"
            "\r\n"
            f"{self.body}"
        )


def parse_seed(value: str) -> RandomSeed:
    """Seeds that look like integers are used as integers."""
    try:
        return int(value)
    except ValueError:
        return value


def parse_query(query_string: str) -> dict[str, Any]:
    """Turn a query string into request fields.

    Returns:
        A dict with an optional ``preset`` and ``seed`` plus any request
        overrides.

    Raises:
        InvalidRequest: For unknown keys or non-numeric values.
    """
    params: dict[str, Any] = {}
    for raw_key, raw_value in parse_qsl(query_string, keep_blank_values=True):
        key = raw_key.lstrip("-").replace("-", "_")
        if key not in _QUERY_KEYS:
            raise InvalidRequest(f"Unknown query parameter: {raw_key!r}")
        field_name, convert = _QUERY_KEYS[key]
        try:
            value = convert(raw_value)
        except ValueError:
            raise InvalidRequest(
                f"Query parameter {raw_key!r} must be an integer, got {raw_value!r}"
            ) from None
        if field_name == "seed":
            value = parse_seed(value)
        params[field_name] = value
    return params


def handle_query(
    query_string: str,
    registry: ThemeRegistry = THEMES,
    tile_size: int | None = None,
) -> WebResponse:
    """Generate a map for one web request.

    Args:
        query_string: The raw ``QUERY_STRING`` (without the leading ``?``).
        registry: Presets to resolve against.
        tile_size: Pixel size of one cell; the renderer default when None.

    Returns:
        200 with the map as base64 PNG text, or 400 with a plain message
        when the query is invalid or the request cannot fit.
    """
    try:
        params = parse_query(query_string)
        preset = params.pop("preset", None)
        seed = params.pop("seed", None)
        request = registry.build_request(preset, seed=seed, **params)
        result = GenerationSession(request).run().raise_for_outcome()
    except BattleMapperError as e:
        logger.info(f"Rejected web request {query_string!r}: {e}")
        return WebResponse(400, "text/plain", str(e))

    image = render_image(result, tile_size or config.TILE_SIZE)
    return WebResponse(200, "text/plain", encode_base64(image))


def serve_cgi(query_string: str, out: TextIO) -> int:
    """Answer one CGI request on ``out``.

    Returns:
        0 when a map was served, 1 otherwise.
    """
    response = handle_query(query_string)
    out.write(response.to_cgi())
    out.flush()
    return 0 if response.ok else 1
