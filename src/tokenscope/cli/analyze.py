"""CLI command for analyzing a single file."""

import logging
import sys
import time

import click

from tokenscope.analyze import analyze_file
from tokenscope.models import AnalysisReport
from tokenscope.tokens import TiktokenTokenSource, TokenExtractionError
from tokenscope.utils import configure_logging, get_color_default


logger = logging.getLogger(__name__)


@click.command('analyze')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format')
@click.option('--top', 'top_n', type=click.IntRange(min=0), default=5, help='Number of most expensive lines (default: 5)')
@click.option('--encoding', default=None, help='tiktoken encoding (default: TOKENSCOPE_ENCODING or cl100k_base)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option('--color/--no-color', default=None, help='Force or disable colored output (default: TOKENSCOPE_COLOR, else auto)')
def analyze_command(
    path: str,
    json_output: bool,
    top_n: int,
    encoding: str | None,
    verbose: bool,
    color: bool | None,
):
    """Analyze a file for token waste and LLM reliability issues.

    Counts tokens with tiktoken, runs every detector, and prints scores,
    issues, recommendations and per-line statistics.

    \b
    Examples:
        tokenscope analyze README.md
        tokenscope analyze prompt.txt --json
        tokenscope analyze notes.md --top 20 --encoding o200k_base
    """
    configure_logging(verbose)

    try:
        with open(path, encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f'Error: {path}: {e}', err=True)
        sys.exit(1)

    token_source = TiktokenTokenSource(encoding)
    start_time = time.time()
    try:
        total_tokens = token_source.count_tokens(content)
        analysis = analyze_file(content, total_tokens, token_source)
    except (TokenExtractionError, ValueError) as e:
        # tiktoken raises ValueError for unknown encoding names
        click.echo(f'Error: {path}: {e}', err=True)
        sys.exit(1)
    elapsed = time.time() - start_time
    logger.info(f'[CLI] Analyzed {path} in {elapsed:.3f}s')

    report = AnalysisReport.from_analysis(path, token_source.encoding_name, analysis, elapsed, top_n=top_n)

    if json_output:
        click.echo(report.model_dump_json(indent=2))
        return

    colorize = color if color is not None else get_color_default(sys.stdout.isatty())
    click.echo(report.to_cli(colorize=colorize), color=colorize)
