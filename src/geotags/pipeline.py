"""
Post-processing stages applied to generated tags.

Stages run in a fixed order: legacy flattening, filtering by feature
flags, dedupe, sort, sanitize. Each stage takes a list of tags and returns
a new list; none of them mutates its input.
"""

import logging
from collections.abc import Hashable
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .options import Options
from .tags import (
    COUNTRY_CODE,
    COUNTRY_NAME,
    GEOHASH,
    ISO_3166_1,
    ISO_3166_2,
    ISO_3166_3,
    LABEL,
    MARKERS,
    REGION_CODE,
    Tag,
    is_declaration,
    is_geohash,
    iso31661_namespace,
    iso31662_namespace,
    iso31663_namespace,
    namespace_of,
)

logger = logging.getLogger(__name__)

_BASE_COUNTRY = frozenset({COUNTRY_CODE, ISO_3166_1})
_SUBDIVISION = frozenset({REGION_CODE, ISO_3166_2})


def filter_out_type(tags: Iterable[Tag], namespace: str) -> List[Tag]:
    """Remove labels in a namespace together with its declarations."""
    return [tag for tag in tags if namespace_of(tag) != namespace]


def filter_by_flags(tags: Iterable[Tag], options: Options) -> List[Tag]:
    """
    Strip country and region tags the caller switched off.

    A category is stripped when its flag is explicitly False and the more
    specific code/name flag does not switch it back on.
    """
    tags = list(tags)
    if options.country is False:
        if options.country_code is not True:
            tags = filter_out_type(tags, iso31661_namespace(options))
            tags = filter_out_type(tags, iso31663_namespace(options))
        if options.country_name is not True:
            tags = filter_out_type(tags, COUNTRY_NAME)
    if options.region is False and options.region_code is not True:
        tags = filter_out_type(tags, iso31662_namespace(options))
    return tags


def _slot(tag: Sequence[Any]) -> Optional[Tuple[Any, Optional[str]]]:
    """
    Value and namespace a tag occupies, or None if it is always kept.

    Successor-country tags share the slot of base country tags.
    """
    if len(tag) < 2 or is_declaration(tag):
        return None
    if not all(isinstance(field, Hashable) for field in tag):
        return None
    value = tag[1]
    namespace = namespace_of(tag)
    if namespace == ISO_3166_3:
        namespace = ISO_3166_1
    return (value, namespace)


def dedupe(tags: Iterable[Tag]) -> List[Tag]:
    """
    Drop tags whose value repeats an earlier tag in the same namespace.

    Declarations are always kept. Afterwards, subdivision labels that
    repeat a base country code are dropped; the country tag takes
    precedence.
    """
    seen = set()
    result = []
    for tag in tags:
        slot = _slot(tag)
        if slot is not None:
            if slot in seen:
                continue
            seen.add(slot)
        result.append(tag)

    slots = [_slot(tag) for tag in result]
    country_values = {
        slot[0] for slot in slots
        if slot is not None and slot[1] in _BASE_COUNTRY
    }
    if not country_values:
        return result
    return [
        tag for tag, slot in zip(result, slots)
        if slot is None
        or slot[1] not in _SUBDIVISION
        or slot[0] not in country_values
    ]


def sort_tags_by_key(tags: Iterable[Tag], flat: bool = False) -> List[Tag]:
    """
    Stable sort of tags.

    Namespaced tags sort by marker, which puts declarations ("G") ahead of
    labels ("g") and otherwise keeps the generated order. Flat tags sort by
    their key.
    """
    if flat:
        return sorted(tags, key=lambda tag: str(tag[2]) if len(tag) > 2 else "")
    return sorted(tags, key=lambda tag: str(tag[0]) if len(tag) else "")


def _is_valid(tag: Any) -> bool:
    if isinstance(tag, (str, bytes)) or not isinstance(tag, Sequence):
        return False
    if len(tag) < 2 or not isinstance(tag[0], str) or tag[0] not in MARKERS:
        return False
    value = tag[1]
    if not isinstance(value, str) or not value:
        return False
    return all(isinstance(field, str) for field in tag[2:])


def filter_non_string_tags(tags: Iterable[Any]) -> List[Tag]:
    """
    Drop malformed tags.

    A tag survives when its marker is known, its value is a non-empty
    string and every other field is a string.
    """
    return [tuple(tag) for tag in tags if _is_valid(tag)]


def flatten(tags: Iterable[Tag]) -> List[Tag]:
    """Convert namespaced tags to the flat (legacy) family."""
    result = []
    for tag in tags:
        if is_declaration(tag):
            continue
        if is_geohash(tag):
            tag = (LABEL, tag[1], GEOHASH)
        result.append(tag)
    return result


def postprocess(tags: Iterable[Tag], options: Options) -> List[Tag]:
    """
    Run the enabled post-processing stages in order.

    Args:
        tags: Raw tags from the generator
        options: Resolved options

    Returns:
        Final tag list
    """
    tags = list(tags)
    if options.legacy:
        tags = flatten(tags)

    tags = filter_by_flags(tags, options)
    logger.debug("%d tags after filtering", len(tags))

    if options.dedupe:
        tags = dedupe(tags)
        logger.debug("%d tags after dedupe", len(tags))
    if options.sort:
        tags = sort_tags_by_key(tags, flat=options.legacy)
    if options.sanitize:
        tags = filter_non_string_tags(tags)
        logger.debug("%d tags after sanitize", len(tags))
    return tags
