import json
from collections.abc import Iterable
from typing import Any, Optional
import jsonpatch
import jsonpointer
from pydantic import Field, ConfigDict, JsonValue

from image_patch.etc.consts import CONFIG, LOGGER
from image_patch.etc.enums import OperationKind
from image_patch.etc.errors import MalformedOperationError, PatchApplyError, \
    UnsupportedOperationError
from .base import JsonModel
from .operation import Operation


class ImageUpdate(JsonModel):
    """
    An ordered, immutable set of patch operations making up one image update request.

    Operations are applied by the service in sequence, so order is significant and
    kept exactly as given. The same path may appear more than once.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )

    operations: tuple[Operation, ...] = Field(
        default=(),
        description='The patch operations, in the order the service applies them',
    )

    def __len__(self) -> int:
        return len(self.operations)

    def __getitem__(self, index: int) -> Operation:
        return self.operations[index]

    def __repr__(self) -> str:
        return f'ImageUpdate(operations={list(self.operations)!r})'

    @property
    def content_type(self) -> str:
        """
        Media type of the serialised patch, for the request body sent to the service.
        """
        return CONFIG.patch_media_type

    @classmethod
    def empty(cls) -> 'ImageUpdate':
        """
        An update without any operations.
        """
        return cls()

    def to_json(self, preserve_unrecognized: Optional[bool] = None) -> list[dict]:
        """
        Serialise the update into its wire array.
        :param preserve_unrecognized: Whether to emit the original verb of unrecognised
            operations. Defaults to the library configuration.
        :return: A new list of operation objects, in order.
        """
        return [op.to_json(preserve_unrecognized) for op in self.operations]

    def to_json_string(self, preserve_unrecognized: Optional[bool] = None) -> str:
        """
        Serialise the update into compact JSON text.
        """
        return json.dumps(
            self.to_json(preserve_unrecognized),
            separators=(',', ':'),
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, data: Any) -> 'ImageUpdate':
        """
        Parse a wire array into an update.

        Parsing stops at the first malformed element, and nothing is returned for a
        partially valid array.
        :param data: The decoded JSON array.
        :return: The parsed update.
        :raises MalformedOperationError: If the data is not an array, or any element
            is not a valid operation.
        """
        if not isinstance(data, list):
            raise MalformedOperationError(
                f'expected a JSON array of operations, got {type(data).__name__}'
            )

        operations = tuple(
            Operation.from_json(node, index=i) for i, node in enumerate(data)
        )
        LOGGER.debug('Parsed image update with %d operations', len(operations))

        return cls(operations=operations)

    @classmethod
    def from_json_string(cls, text: str | bytes) -> 'ImageUpdate':
        """
        Decode JSON text and parse it into an update.
        :param text: The JSON text of the patch body.
        :return: The parsed update.
        :raises MalformedOperationError: If the text is not valid JSON or not a valid patch.
        """
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedOperationError(f'patch body is not valid JSON: {e}') from e

        return cls.from_json(data)

    def apply(self, document: dict[str, JsonValue]) -> dict[str, JsonValue]:
        """
        Preview the update against a local JSON document.

        The document is not modified; a patched copy is returned.
        :param document: The JSON document, typically an image as returned by the service.
        :return: The patched copy of the document.
        :raises UnsupportedOperationError: If the update has an unrecognised operation.
        :raises PatchApplyError: If an operation cannot be applied to the document.
        """
        for i, op in enumerate(self.operations):
            if op.kind is OperationKind.UNRECOGNIZED:
                raise UnsupportedOperationError(
                    f'Operation at index {i} ({op.op_name()!r} on {op.path}) cannot be applied'
                )

        try:
            patch = jsonpatch.JsonPatch(self.to_json())
            return patch.apply(document)
        except (jsonpatch.InvalidJsonPatch,
                jsonpatch.JsonPatchException,
                jsonpointer.JsonPointerException) as e:
            raise PatchApplyError(str(e)) from e

    @classmethod
    def builder(cls) -> 'ImageUpdateBuilder':
        """
        A builder for a new, empty update.
        """
        return ImageUpdateBuilder()

    def to_builder(self) -> 'ImageUpdateBuilder':
        """
        A builder seeded with the operations of this update.
        """
        return ImageUpdateBuilder.from_update(self)


class ImageUpdateBuilder:
    """
    Mutable companion of ImageUpdate, used to assemble the operations before
    finalising them.

    The builder stays usable after build(); every build() returns an independent
    update. It is meant for a single owner and is not thread safe.
    """

    def __init__(self, operations: Iterable[Operation] = ()):
        self._operations: list[Operation] = []
        self.set_operations(operations)

    def __len__(self) -> int:
        return len(self._operations)

    @classmethod
    def from_update(cls, update: ImageUpdate) -> 'ImageUpdateBuilder':
        """
        Create a builder seeded with a copy of the operations of an existing update.
        :param update: The update to start from.
        :return: The new builder.
        """
        return cls(update.operations)

    @property
    def operations(self) -> list[Operation]:
        """
        A copy of the pending operations.
        """
        return list(self._operations)

    def set_operations(self, operations: Iterable[Operation]) -> 'ImageUpdateBuilder':
        """
        Replace all pending operations.
        :param operations: The new operations, in order.
        :return: The builder itself.
        :raises TypeError: If an item is not an Operation.
        """
        pending = list(operations)

        for item in pending:
            if not isinstance(item, Operation):
                raise TypeError(f'Expected Operation, got {type(item).__name__}')

        self._operations = pending
        return self

    def append(self, operation: Operation) -> 'ImageUpdateBuilder':
        """
        Append one operation to the pending list.
        :param operation: The operation to append.
        :return: The builder itself.
        """
        if not isinstance(operation, Operation):
            raise TypeError(f'Expected Operation, got {type(operation).__name__}')

        self._operations.append(operation)
        return self

    def add(self, path: str, value: JsonValue) -> 'ImageUpdateBuilder':
        return self.append(Operation.add(path, value))

    def replace(self, path: str, value: JsonValue) -> 'ImageUpdateBuilder':
        return self.append(Operation.replace(path, value))

    def remove(self, path: str) -> 'ImageUpdateBuilder':
        return self.append(Operation.remove(path))

    def clear(self) -> 'ImageUpdateBuilder':
        self._operations = []
        return self

    def build(self) -> ImageUpdate:
        """
        Finalise the pending operations into an immutable update.
        :return: A new update, independent of any previously built one.
        """
        return ImageUpdate(operations=tuple(self._operations))
