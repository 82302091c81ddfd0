import typer

import image_patch.cli.patch as patch


def create_cli() -> typer.Typer:
    app = typer.Typer(help='Image registry patch request tool')

    app.add_typer(patch.app, name='patch', help='Inspect, derive and preview image patches')

    return app


def main():
    app = create_cli()

    app()


if __name__ == '__main__':
    main()
