"""Drop payload shapes and their parsers.

A raw drop payload is classified once into one of the payload variants, then
each variant is turned into local filesystem paths by a pure function. Single
entries go through an ordered chain of parse strategies; the first strategy
that recognizes an entry decides its fate.
"""

import json
import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit
from urllib.request import url2pathname

from loguru import logger

from favorites_tree.protocols import AttachmentProtocol

FILE_SCHEME = "file"


class PayloadError(ValueError):
    """The internal drag payload could not be parsed."""


# --- Payload variants ---


@dataclass(frozen=True)
class UriListPayload:
    """``text/uri-list`` text."""

    text: str


@dataclass(frozen=True)
class ArrayPayload:
    """Sequence of URI-like objects, path-bearing objects, or strings."""

    items: tuple[Any, ...]


@dataclass(frozen=True)
class AttachmentPayload:
    """Opaque attachment that must be materialized asynchronously."""

    attachment: AttachmentProtocol


@dataclass(frozen=True)
class UnknownPayload:
    """Anything else; yields no paths."""

    raw: Any


Payload = UriListPayload | ArrayPayload | AttachmentPayload | UnknownPayload


def classify_payload(raw: Any) -> Payload:
    """Resolve the payload discriminator once, at the boundary."""
    if isinstance(raw, (UriListPayload, ArrayPayload, AttachmentPayload, UnknownPayload)):
        return raw
    if isinstance(raw, bytes):
        return UriListPayload(raw.decode("utf-8", errors="replace"))
    if isinstance(raw, str):
        return UriListPayload(raw)
    if isinstance(raw, Sequence):
        return ArrayPayload(tuple(raw))
    if isinstance(raw, AttachmentProtocol):
        return AttachmentPayload(raw)
    return UnknownPayload(raw)


# --- Single-entry parse strategies ---


@dataclass(frozen=True)
class ParseOutcome:
    """Result of one parse strategy.

    ``parsed`` False means the strategy did not recognize the entry and the
    next one should be tried. A recognized entry with ``path`` None is a
    non-local URI and is skipped.
    """

    parsed: bool
    path: str | None = None


NOT_PARSED = ParseOutcome(parsed=False)
SKIPPED = ParseOutcome(parsed=True)

ParseStrategy = Callable[[Any], ParseOutcome]


def _uri_to_path(scheme: str, authority: str, path: str, *, quoted: bool) -> ParseOutcome:
    if scheme.lower() != FILE_SCHEME:
        return SKIPPED
    if not path:
        return NOT_PARSED
    local = url2pathname(path) if quoted else path
    if authority and authority.lower() != "localhost":
        # UNC share, file://server/share/x
        local = f"//{authority}{local}"
    return ParseOutcome(parsed=True, path=os.path.abspath(local))


def parse_structured(entry: Any) -> ParseOutcome:
    """Parse URI-like objects and path-bearing objects or mappings."""
    if isinstance(entry, str):
        return NOT_PARSED

    if isinstance(entry, Mapping):
        for key in ("fs_path", "fsPath", "path"):
            value = entry.get(key)
            if isinstance(value, str) and value:
                scheme = entry.get("scheme")
                if key == "path" and isinstance(scheme, str):
                    authority = str(entry.get("authority") or "")
                    return _uri_to_path(scheme, authority, value, quoted=False)
                return ParseOutcome(parsed=True, path=os.path.abspath(value))
        return NOT_PARSED

    scheme = getattr(entry, "scheme", None)
    path = getattr(entry, "path", None)
    if isinstance(scheme, str) and isinstance(path, str):
        # urllib split results keep percent-escapes; editor URI objects are decoded.
        quoted = hasattr(entry, "netloc")
        authority = getattr(entry, "authority", None) or getattr(entry, "netloc", None) or ""
        return _uri_to_path(scheme, str(authority), path, quoted=quoted)

    fs_path = getattr(entry, "fs_path", None) or getattr(entry, "fsPath", None)
    if isinstance(fs_path, str) and fs_path:
        return ParseOutcome(parsed=True, path=os.path.abspath(fs_path))

    if isinstance(entry, os.PathLike):
        return ParseOutcome(parsed=True, path=os.path.abspath(os.fspath(entry)))

    return NOT_PARSED


def parse_string_form(entry: Any) -> ParseOutcome:
    """Parse an entry's string form as a URI or an absolute path."""
    text = (entry if isinstance(entry, str) else str(entry)).strip()
    if not text:
        return NOT_PARSED

    if os.path.isabs(text):
        return ParseOutcome(parsed=True, path=os.path.normpath(text))

    parts = urlsplit(text)
    if not parts.scheme:
        return NOT_PARSED
    if len(parts.scheme) == 1:
        # Windows drive letter, C:\x
        return ParseOutcome(parsed=True, path=os.path.abspath(text))
    return _uri_to_path(parts.scheme, parts.netloc, parts.path, quoted=True)


PARSE_STRATEGIES: tuple[ParseStrategy, ...] = (parse_structured, parse_string_form)


def parse_entry(entry: Any, strategies: Sequence[ParseStrategy] = PARSE_STRATEGIES) -> str | None:
    """Run ``entry`` through the strategy chain. Never raises."""
    for strategy in strategies:
        try:
            outcome = strategy(entry)
        except Exception:
            logger.debug("Parse strategy {} failed for {!r}", strategy.__name__, entry)
            continue
        if outcome.parsed:
            if outcome.path is None:
                logger.debug("Skipping non-local drop entry {!r}", entry)
            return outcome.path
    logger.debug("Dropping unparseable entry {!r}", entry)
    return None


# --- Per-variant parsers ---


def iter_uri_list(text: str) -> list[str]:
    """Split ``text/uri-list`` content, dropping comments and blank lines."""
    return [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]


def paths_from_uri_list(payload: UriListPayload) -> list[str]:
    return _unique(parse_entry(line) for line in iter_uri_list(payload.text))


def paths_from_array(payload: ArrayPayload) -> list[str]:
    paths: list[str | None] = []
    for item in payload.items:
        if isinstance(item, str) and ("\n" in item or item.lstrip().startswith("#")):
            paths.extend(parse_entry(line) for line in iter_uri_list(item))
        else:
            paths.append(parse_entry(item))
    return _unique(paths)


async def paths_from_attachment(payload: AttachmentPayload) -> list[str]:
    """Materialize an attachment: file form first, then string form."""
    attachment = payload.attachment
    try:
        file_entry = await attachment.as_file()
    except Exception:
        logger.opt(exception=True).debug("Attachment could not be resolved to a file")
        file_entry = None
    if file_entry is not None:
        path = parse_entry(file_entry)
        if path is not None:
            return [path]

    try:
        text = await attachment.as_string()
    except Exception:
        logger.opt(exception=True).debug("Attachment could not be resolved to a string")
        return []
    return paths_from_uri_list(UriListPayload(text))


async def resolve_paths(raw: Any) -> list[str]:
    """Turn any drop payload into absolute local paths. Never raises."""
    payload = classify_payload(raw)
    try:
        match payload:
            case UriListPayload():
                return paths_from_uri_list(payload)
            case ArrayPayload():
                return paths_from_array(payload)
            case AttachmentPayload():
                return await paths_from_attachment(payload)
            case _:
                logger.debug("Unrecognized drop payload {!r}", payload)
                return []
    except Exception:
        logger.exception("Failed to resolve paths from drop payload")
        return []


def parse_dragged_ids(raw: Any) -> list[str]:
    """Parse the internal drag payload: a JSON array of string ids.

    Raises:
        PayloadError: if the payload is not a JSON array of strings.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            msg = f"Internal drag payload is not UTF-8: {e}"
            raise PayloadError(msg) from e
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            msg = f"Internal drag payload is not valid JSON: {e}"
            raise PayloadError(msg) from e
    if not isinstance(raw, list) or not all(isinstance(i, str) for i in raw):
        msg = f"Internal drag payload must be a list of ids, got {type(raw).__name__}"
        raise PayloadError(msg)
    return list(dict.fromkeys(raw))


def _unique(paths: Any) -> list[str]:
    return list(dict.fromkeys(p for p in paths if p))
