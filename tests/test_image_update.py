import json
import pytest

from image_patch.etc.enums import OperationKind
from image_patch.etc.errors import MalformedOperationError, PatchApplyError, \
    UnsupportedOperationError
from image_patch.model.image_update import ImageUpdate
from image_patch.model.operation import Operation


PATCH = [
    {'op': 'replace', 'path': '/name', 'value': 'cirros-0.6.2'},
    {'op': 'add', 'path': '/tags/-', 'value': 'lts'},
    {'op': 'add', 'path': '/hw_disk_bus', 'value': 'virtio'},
    {'op': 'remove', 'path': '/os_distro'},
    {'op': 'replace', 'path': '/min_ram', 'value': 512},
]
DOCUMENT = {
    'id': '1bea47ed-f6a9-463b-b423-14b9cca9ad27',
    'name': 'cirros-0.6.1',
    'tags': ['test'],
    'min_ram': 0,
    'os_distro': 'cirros',
}


@pytest.fixture
def update():
    return ImageUpdate.from_json(PATCH)


def test_round_trip(update):
    assert update.to_json() == PATCH
    assert ImageUpdate.from_json(update.to_json()) == update


def test_round_trip_keeps_unrecognized_verb():
    patch = [
        {'op': 'frobnicate', 'path': '/x', 'value': {'a': [1, 2]}},
        {'op': 'remove', 'path': '/y'},
    ]
    update = ImageUpdate.from_json(patch)

    assert update[0].kind is OperationKind.UNRECOGNIZED
    assert update.to_json() == patch
    assert ImageUpdate.from_json(update.to_json()) == update


def test_order_is_preserved(update):
    assert [op.path for op in update.operations] == [node['path'] for node in PATCH]


def test_swapped_operations_differ():
    remove_then_add = ImageUpdate.from_json([
        {'op': 'remove', 'path': '/a'},
        {'op': 'add', 'path': '/a', 'value': 1},
    ])
    add_then_remove = ImageUpdate.from_json([
        {'op': 'add', 'path': '/a', 'value': 1},
        {'op': 'remove', 'path': '/a'},
    ])

    assert remove_then_add != add_then_remove
    assert remove_then_add.to_json() != add_then_remove.to_json()


def test_repeated_paths_are_kept():
    update = ImageUpdate.from_json([
        {'op': 'replace', 'path': '/name', 'value': 'a'},
        {'op': 'replace', 'path': '/name', 'value': 'b'},
    ])

    assert len(update) == 2
    assert update[1].value == 'b'


def test_unrecognized_kind_tolerated():
    update = ImageUpdate.from_json([{'op': 'frobnicate', 'path': '/x'}])

    assert len(update) == 1
    assert update[0].kind is OperationKind.UNRECOGNIZED
    assert update[0].path == '/x'


def test_missing_path_rejected():
    with pytest.raises(MalformedOperationError):
        ImageUpdate.from_json([{'op': 'add', 'value': 'foo'}])


def test_failure_reports_index():
    patch = [
        {'op': 'add', 'path': '/a', 'value': 1},
        {'op': 'add', 'value': 2},
        'garbage',
    ]

    with pytest.raises(MalformedOperationError) as excinfo:
        ImageUpdate.from_json(patch)

    assert excinfo.value.index == 1
    assert 'index 1' in str(excinfo.value)


@pytest.mark.parametrize('data', [{'op': 'add', 'path': '/a', 'value': 1}, None, 'add'])
def test_non_array_rejected(data):
    with pytest.raises(MalformedOperationError):
        ImageUpdate.from_json(data)


def test_empty_update():
    empty = ImageUpdate.empty()

    assert empty.to_json() == []
    assert ImageUpdate.from_json([]) == empty
    assert len(empty) == 0
    assert not empty


def test_operations_view_is_read_only(update):
    operations = update.operations

    assert isinstance(operations, tuple)
    with pytest.raises(AttributeError):
        operations.append(Operation.remove('/x'))     # type: ignore[attr-defined]


def test_structural_equality_and_hash():
    first = ImageUpdate.from_json(PATCH)
    second = ImageUpdate.from_json(json.loads(json.dumps(PATCH)))

    assert first == second
    assert hash(first) == hash(second)
    assert first != ImageUpdate.from_json(PATCH[:-1])


def test_json_string(update):
    text = update.to_json_string()

    assert text.startswith('[{"op":"replace","path":"/name","value":"cirros-0.6.2"}')
    assert ImageUpdate.from_json_string(text) == update


def test_invalid_json_string_rejected():
    with pytest.raises(MalformedOperationError):
        ImageUpdate.from_json_string('[{"op": "add", ')


def test_content_type(update):
    assert update.content_type == 'application/openstack-images-v2.1-json-patch'


def test_apply(update):
    result = update.apply(DOCUMENT)

    assert result == {
        'id': '1bea47ed-f6a9-463b-b423-14b9cca9ad27',
        'name': 'cirros-0.6.2',
        'tags': ['test', 'lts'],
        'min_ram': 512,
        'hw_disk_bus': 'virtio',
    }
    assert DOCUMENT['name'] == 'cirros-0.6.1'
    assert DOCUMENT['tags'] == ['test']
    assert 'os_distro' in DOCUMENT


def test_apply_rejects_unrecognized():
    update = ImageUpdate.from_json([{'op': 'frobnicate', 'path': '/name'}])

    with pytest.raises(UnsupportedOperationError):
        update.apply(DOCUMENT)


def test_apply_conflict():
    update = ImageUpdate.from_json([{'op': 'remove', 'path': '/missing'}])

    with pytest.raises(PatchApplyError):
        update.apply(DOCUMENT)


def test_apply_invalid_pointer():
    update = ImageUpdate.from_json([{'op': 'add', 'path': 'name', 'value': 1}])

    with pytest.raises(PatchApplyError):
        update.apply({})


def test_undecodable_json_bytes_rejected():
    with pytest.raises(MalformedOperationError):
        ImageUpdate.from_json_string(b'[\xff]')


def test_field_iteration_is_untouched(update):
    assert dict(update) == {'operations': update.operations}
