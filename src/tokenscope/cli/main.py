"""Main CLI entry point with command groups"""

import click

from tokenscope.__version__ import __version__
from tokenscope.cli.analyze import analyze_command


@click.group()
@click.version_option(version=__version__, prog_name='tokenscope')
def cli():
    """
    tokenscope - Token efficiency and LLM reliability analyzer.

    \b
    Commands:
      tokenscope analyze <file>   Analyze a file for token waste and safety issues

    \b
    Examples:
      tokenscope analyze README.md
      tokenscope analyze prompt.txt --json
      tokenscope analyze docs/guide.md --top 20 --encoding o200k_base
    """


# Register subcommands
cli.add_command(analyze_command, name='analyze')


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
