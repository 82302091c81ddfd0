import json
from pathlib import Path
import typer
from rich.markup import escape
from rich.table import Table

from image_patch.diff import diff
from image_patch.etc.enums import OperationKind
from image_patch.etc.errors import MalformedOperationError, PatchApplyError
from image_patch.model.image_update import ImageUpdate
from .util import CONSOLE, fail, load_json_file


app = typer.Typer()


def _load_update(path: Path) -> ImageUpdate:
    try:
        return ImageUpdate.from_json(load_json_file(path))
    except MalformedOperationError as e:
        raise fail(f'Invalid patch in {path}: {e}') from e


@app.command('show')
def show_patch(file: Path = typer.Argument(..., help='JSON file holding the patch array')):
    """
    List the operations of a patch file.
    """
    update = _load_update(file)

    table = Table(title=f'{len(update)} operation(s), {update.content_type}')
    table.add_column('#', justify='right')
    table.add_column('Op')
    table.add_column('Path')
    table.add_column('Value')

    for i, op in enumerate(update.operations):
        op_name = op.op_name()
        if op.kind is OperationKind.UNRECOGNIZED and op_name != op.kind.serialize():
            op_name = f'{op_name} (unrecognised)'

        value = ''
        if op.kind is not OperationKind.REMOVE and op.has_value:
            value = json.dumps(op.value, ensure_ascii=False)

        table.add_row(str(i), escape(op_name), escape(op.path), escape(value))

    CONSOLE.print(table)


@app.command('diff')
def diff_patch(current: Path = typer.Argument(..., help='JSON file holding the image as reported'),
               desired: Path = typer.Argument(..., help='JSON file holding the desired attributes'),
               ):
    """
    Print the patch that moves the current image to the desired attributes.
    """
    current_data = load_json_file(current)
    desired_data = load_json_file(desired)

    if not isinstance(current_data, dict) or not isinstance(desired_data, dict):
        raise fail('Both the current image and the desired attributes must be JSON objects')

    update = diff(current_data, desired_data)
    typer.echo(json.dumps(update.to_json(), indent=2, ensure_ascii=False))


@app.command('apply')
def apply_patch(document: Path = typer.Argument(..., help='JSON file holding the document to patch'),
                file: Path = typer.Argument(..., help='JSON file holding the patch array'),
                ):
    """
    Preview the result of applying a patch to a document.
    """
    document_data = load_json_file(document)
    update = _load_update(file)

    try:
        result = update.apply(document_data)
    except PatchApplyError as e:
        raise fail(f'Cannot apply patch: {e}') from e

    typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
