import copy
import json
from collections.abc import Mapping
from typing import Any, Optional
from pydantic import Field, ConfigDict, JsonValue, ValidationError, field_validator, \
    model_validator

from image_patch.etc.consts import CONFIG, LOGGER
from image_patch.etc.enums import OperationKind
from image_patch.etc.errors import MalformedOperationError
from .base import JsonModel


VALUE_REQUIRED = (OperationKind.ADD, OperationKind.REPLACE)


class Operation(JsonModel):
    """
    A single instruction in an image patch request.

    The value is kept as an untyped JSON value, since the attribute types of
    the target image are not known here. Instances are immutable: the stored
    value is a private copy, and `value` hands out a fresh copy on every read.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='ignore',
        populate_by_name=True,
        serialize_by_alias=True,
    )

    kind: OperationKind = Field(
        default=OperationKind.UNRECOGNIZED,
        alias='op',
        description='The operation to be performed',
    )
    path: str = Field(
        ...,
        description='A slash delimited pointer to the target attribute',
    )
    json_value: JsonValue = Field(
        default=None,
        alias='value',
        description='The value to be used in the operation. Not used for "remove" operation.',
    )
    raw_op: Optional[str] = Field(
        default=None,
        exclude=True,
        description='The verb as received, kept only for unrecognised operations',
    )

    @model_validator(mode='before')
    @classmethod
    def _parse_kind(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        data = dict(data)
        key = 'op' if 'op' in data else 'kind'
        raw = data.get(key)

        if isinstance(raw, OperationKind):
            kind = raw
        else:
            kind = OperationKind.parse(raw)
            if kind is OperationKind.UNRECOGNIZED and isinstance(raw, str) \
                    and data.get('raw_op') is None:
                data['raw_op'] = raw

        data[key] = kind

        if kind is OperationKind.REMOVE:
            data.pop('value', None)
            data.pop('json_value', None)

        return data

    @field_validator('json_value', mode='after')
    @classmethod
    def _own_value(cls, value: JsonValue) -> JsonValue:
        return copy.deepcopy(value)

    @model_validator(mode='after')
    def _check_value(self) -> 'Operation':
        if self.kind in VALUE_REQUIRED and not self.has_value:
            raise ValueError(f'"{self.kind.serialize()}" operation on {self.path} requires a value')

        return self

    @property
    def has_value(self) -> bool:
        """
        Whether a value was given, an explicit JSON null included.
        """
        return 'json_value' in self.model_fields_set

    @property
    def value(self) -> JsonValue:
        """
        A copy of the operation value, None when absent.
        """
        return copy.deepcopy(self.json_value)

    def _identity(self) -> tuple:
        return (
            self.kind,
            self.path,
            self.raw_op,
            self.has_value,
            json.dumps(self.json_value, sort_keys=True),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Operation):
            return NotImplemented

        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def op_name(self, preserve_unrecognized: Optional[bool] = None) -> str:
        """
        The verb to put on the wire for this operation.
        :param preserve_unrecognized: Whether to emit the original verb of an unrecognised
            operation. Defaults to the library configuration.
        :return: The verb string.
        """
        if preserve_unrecognized is None:
            preserve_unrecognized = CONFIG.preserve_unrecognized_ops

        if self.kind is OperationKind.UNRECOGNIZED and self.raw_op is not None \
                and preserve_unrecognized:
            return self.raw_op

        return self.kind.serialize()

    def to_json(self, preserve_unrecognized: Optional[bool] = None) -> dict:
        """
        Serialise the operation into its wire object.

        The "value" key is left out for "remove" operations and when no value was given.
        :param preserve_unrecognized: Whether to emit the original verb of an unrecognised
            operation. Defaults to the library configuration.
        :return: A new dictionary, safe for the caller to modify.
        """
        node = {
            'op': self.op_name(preserve_unrecognized),
            'path': self.path,
        }

        if self.kind is not OperationKind.REMOVE and self.has_value:
            node['value'] = copy.deepcopy(self.json_value)

        return node

    @classmethod
    def from_json(cls,
                  data: Any,
                  index: Optional[int] = None,
                  ) -> 'Operation':
        """
        Parse a wire object into an operation.

        Unknown verbs are not an error; they are kept as UNRECOGNIZED.
        :param data: The decoded JSON object.
        :param index: Position of the object in the enclosing patch, used in error messages.
        :return: The parsed operation.
        :raises MalformedOperationError: If the object cannot form a valid operation.
        """
        if not isinstance(data, Mapping):
            raise MalformedOperationError(
                f'expected a JSON object, got {type(data).__name__}',
                index,
            )
        if 'path' not in data:
            raise MalformedOperationError('missing required "path"', index)
        if not isinstance(data['path'], str):
            raise MalformedOperationError(
                f'"path" must be a string, got {type(data["path"]).__name__}',
                index,
            )

        raw = data.get('op')
        kind = OperationKind.parse(raw)

        if kind in VALUE_REQUIRED and 'value' not in data:
            raise MalformedOperationError(
                f'"{kind.serialize()}" operation on {data["path"]} is missing "value"',
                index,
            )
        if kind is OperationKind.UNRECOGNIZED:
            LOGGER.warning('Unrecognised patch operation %r on %s, keeping it as data',
                           raw, data['path'])

        fields = {
            'op': raw,
            'path': data['path'],
        }
        if 'value' in data:
            fields['value'] = data['value']

        try:
            return cls.model_validate(fields)
        except ValidationError as e:
            raise MalformedOperationError(str(e), index) from e

    @classmethod
    def add(cls, path: str, value: JsonValue) -> 'Operation':
        """
        Create an "add" operation.
        """
        return cls(kind=OperationKind.ADD, path=path, value=value)

    @classmethod
    def replace(cls, path: str, value: JsonValue) -> 'Operation':
        """
        Create a "replace" operation.
        """
        return cls(kind=OperationKind.REPLACE, path=path, value=value)

    @classmethod
    def remove(cls, path: str) -> 'Operation':
        """
        Create a "remove" operation.
        """
        return cls(kind=OperationKind.REMOVE, path=path)
