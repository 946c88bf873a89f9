"""
Command Line Interface for dockerton.
"""
import os

import click

from ..errors import DockertonError
from ..PARSERS.definition_parser import DefinitionParser
from ..UTILS.command_utils import parse_flag_assignments


def _load_builder(ctx):
    """Parses the definition file and returns (definition, builder)."""
    path = ctx.obj['file']
    if not os.path.exists(path):
        raise click.ClickException(f"{path} not found.")
    parser = DefinitionParser()
    try:
        definition = parser.parse(path)
        return definition, parser.to_builder(definition)
    except DockertonError as e:
        raise click.ClickException(str(e))


def _flags(assignments):
    try:
        return parse_flag_assignments(assignments)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _render(ctx, output):
    definition, builder = _load_builder(ctx)
    output_file = output or definition.output_file
    options = {'output_file': output_file} if output_file else {}
    try:
        builder.serialize(**options)
    except DockertonError as e:
        raise click.ClickException(str(e))
    return definition, builder


def _build(ctx, output, build_dir, build_args):
    definition, builder = _render(ctx, output)
    try:
        details = builder.build_image(dir=build_dir or definition.build_dir,
                                      args=_flags(build_args))
    except DockertonError as e:
        raise click.ClickException(str(e))
    click.echo(f"Built {builder.tag} ({details.id})")
    return builder


@click.group()
@click.option('--file', '-f', default='dockerton.yml', help='Image definition file path')
@click.pass_context
def cli(ctx, file):
    """
    dockerton - build Dockerfiles from image definitions.

    Generates a Dockerfile from a YAML definition, then builds and runs it
    with docker.
    """
    ctx.ensure_object(dict)
    ctx.obj['file'] = file


@cli.command()
@click.option('--output', '-o', default=None, help='Dockerfile output path')
@click.pass_context
def render(ctx, output):
    """Write the Dockerfile and print its contents."""
    _, builder = _render(ctx, output)
    click.echo(builder.rendered)


@cli.command()
@click.option('--output', '-o', default=None, help='Dockerfile output path')
@click.option('--dir', 'build_dir', default=None, help='Build context directory')
@click.option('--arg', 'build_args', multiple=True, help='Extra docker build flag, FLAG=VALUE')
@click.pass_context
def build(ctx, output, build_dir, build_args):
    """Render the Dockerfile and build the image."""
    _build(ctx, output, build_dir, build_args)


@cli.command()
@click.option('--output', '-o', default=None, help='Dockerfile output path')
@click.option('--dir', 'build_dir', default=None, help='Build context directory')
@click.option('--arg', 'build_args', multiple=True, help='Extra docker build flag, FLAG=VALUE')
@click.option('--run-arg', 'run_args', multiple=True, help='Extra docker run flag, FLAG=VALUE')
@click.pass_context
def run(ctx, output, build_dir, build_args, run_args):
    """Render, build and run the image."""
    builder = _build(ctx, output, build_dir, build_args)
    try:
        builder.run_image(args=_flags(run_args))
    except DockertonError as e:
        raise click.ClickException(str(e))


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
