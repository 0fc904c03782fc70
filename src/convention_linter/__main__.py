"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from convention_linter.infrastructure.di.container import ConventionLinterContainer
from convention_linter.interface.cli import CLIDependencies, create_app


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = ConventionLinterContainer()

    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        registry=container.get_registry(),
        messages=container.get_message_catalog(),
        parser=container.get_astroid_gateway(),
        fixer_gateway=container.get_fixer_gateway(),
        filesystem=container.get_filesystem_gateway(),
    )

    app = create_app(deps)
    app()


if __name__ == "__main__":
    main()
