"""
Derive an image update from the current state of an image and the desired attribute values.
"""

import json
from collections.abc import Mapping
from typing import Any
import jsonpointer

from image_patch.etc.consts import LOGGER
from image_patch.model.image import Image
from image_patch.model.image_update import ImageUpdate, ImageUpdateBuilder


# Attributes maintained by the service, which a patch cannot change
READ_ONLY_ATTRIBUTES = frozenset({
    'id',
    'status',
    'checksum',
    'size',
    'virtual_size',
    'created_at',
    'updated_at',
    'self',
    'file',
    'schema',
    'direct_url',
    'owner',
})


def _same_json(a: Any, b: Any) -> bool:
    # Plain == treats True and 1 as equal
    return json.dumps(a, sort_keys=True) == json.dumps(b, sort_keys=True)


def diff(current: Image | Mapping[str, Any],
         desired: Mapping[str, Any],
         ) -> ImageUpdate:
    """
    Build the update that moves an image from its current attributes to the desired ones.

    Only the attributes named in `desired` are considered. A desired value of None
    removes the attribute. Operations follow the order of `desired`.
    :param current: The image as reported by the service, or its JSON representation.
    :param desired: Attribute names, as used on the wire, mapped to their new values.
    :return: The derived update, empty if nothing changes.
    """
    if isinstance(current, Image):
        current = {**current.to_json(), **current.properties}

    builder = ImageUpdateBuilder()

    for key, value in desired.items():
        if key in READ_ONLY_ATTRIBUTES:
            LOGGER.warning('Attribute %s is read-only and cannot be patched, ignoring it', key)
            continue

        path = '/' + jsonpointer.escape(key)

        if key not in current:
            if value is not None:
                builder.add(path, value)
        elif value is None:
            if current[key] is not None:
                builder.remove(path)
        elif not _same_json(current[key], value):
            builder.replace(path, value)

    update = builder.build()
    LOGGER.debug('Derived image update with %d operations', len(update))

    return update
