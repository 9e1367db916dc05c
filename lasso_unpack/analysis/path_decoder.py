"""
Decoding of Lasso's synthetic module paths.

Lasso names every bundled module with a path whose package segment carries the
version after a ``$`` delimiter::

    /lodash$4.17.0/lib/index        -> lodash, 4.17.0, lib/index
    /@scope/pkg$2.0.0/lib/a         -> @scope/pkg, 2.0.0, lib/a
    /events/events                  -> events, "", events

All functions here are pure and never raise: input shapes they do not understand
decode to a partially populated PathIdentity with empty strings.

Known limitation: the first ``$``-bearing segment is always taken as the package
boundary. Every segment before it is kept verbatim as part of the package name,
so a path whose scope segment itself carries a ``$`` (or that has several
segments ahead of the package) is not a supported shape and decodes literally.
"""

from typing import List, Optional
import logging

from .models import PathIdentity

logger = logging.getLogger(__name__)

VERSION_DELIMITER = "$"
SEGMENT_SEPARATOR = "/"
SCOPE_PREFIX = "@"


def split_segments(path: str) -> List[str]:
    """Split a synthetic path into segments, dropping the root slash."""
    if path.startswith(SEGMENT_SEPARATOR):
        path = path[len(SEGMENT_SEPARATOR):]
    return path.split(SEGMENT_SEPARATOR)


def find_package_segment(segments: List[str]) -> Optional[int]:
    """Index of the first segment carrying a version delimiter, if any."""
    for index, segment in enumerate(segments):
        if VERSION_DELIMITER in segment:
            return index
    return None


def decode_module_path(path: str) -> PathIdentity:
    """Decode a ``def``-style path into package name, version and subpath.

    Args:
        path: Synthetic module path such as ``/pkg$1.2.3/lib/index``

    Returns:
        PathIdentity; version is empty when no segment carries a ``$``
    """
    if not path:
        return PathIdentity()

    segments = split_segments(path)
    index = find_package_segment(segments)

    if index is None:
        # Unversioned path: the first segment is the package
        return PathIdentity(
            package_name=segments[0],
            version="",
            file_name=SEGMENT_SEPARATOR.join(segments[1:]),
        )

    name, _, version = segments[index].partition(VERSION_DELIMITER)
    leading = segments[:index]
    if leading and not (len(leading) == 1 and leading[0].startswith(SCOPE_PREFIX)):
        logger.debug(f"Unsupported path shape, keeping leading segments verbatim: {path}")

    return PathIdentity(
        package_name=SEGMENT_SEPARATOR.join(leading + [name]),
        version=version,
        file_name=SEGMENT_SEPARATOR.join(segments[index + 1:]),
    )


def decode_installed(package_name: str, version: str) -> PathIdentity:
    """Identity of an ``installed(parent, name, version)`` dependency edge.

    The name and version arrive as separate literals, so nothing is parsed and
    there is no module subpath.
    """
    return PathIdentity(package_name=package_name or "", version=version or "", file_name="")


def decode_alias_source(path: str) -> PathIdentity:
    """Identity of the aliased side of a ``main``, ``remap`` or ``builtin`` call."""
    return decode_module_path(path)


def package_prefix(identity: PathIdentity) -> str:
    """The ``name$version`` prefix a versioned path starts with (after its root slash)."""
    if not identity.version:
        return identity.package_name
    return f"{identity.package_name}{VERSION_DELIMITER}{identity.version}"
