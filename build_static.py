#!/usr/bin/env python3
"""
Render the portfolio once and write it out as a static site.

Usage:
    python build_static.py [--output PATH] [--username NAME]

Produces:
    site/
      index.html          - the rendered portfolio page
      static/style.css    - stylesheet
      Papers/             - paper PDFs, when a local Papers directory exists
"""

import argparse
import asyncio
import logging
import shutil
import sys
from pathlib import Path

import settings
from render import build_portfolio_context, render_portfolio

logger = logging.getLogger(__name__)


def build_static(output_dir: Path, username: str | None = None) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)

    context = asyncio.run(build_portfolio_context(username=username))
    page = render_portfolio(context, static_prefix='static', static_export=True)

    index_path = output_dir / 'index.html'
    index_path.write_text(page, encoding='utf-8')
    logger.info('Wrote %s (%s bytes)', index_path, len(page))

    static_out = output_dir / 'static'
    static_out.mkdir(exist_ok=True)
    shutil.copy2(Path(settings.STATIC_DIR) / 'style.css', static_out / 'style.css')

    papers_dir = Path(settings.PAPERS_DIR)
    if papers_dir.is_dir() and papers_dir.resolve() != (output_dir / 'Papers').resolve():
        shutil.copytree(papers_dir, output_dir / 'Papers', dirs_exist_ok=True)
        logger.info('Copied papers from %s', papers_dir)

    return index_path


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Build the static portfolio page.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python build_static.py
    python build_static.py --output ./docs
    python build_static.py --username octocat
        """,
    )
    parser.add_argument(
        '--output',
        type=Path,
        default=Path('site'),
        help='Output directory for the static site (default: ./site)',
    )
    parser.add_argument(
        '--username',
        default=None,
        help=f'GitHub account to show (default: {settings.GITHUB_USERNAME})',
    )

    args = parser.parse_args(argv)
    settings.setup_logging()
    try:
        build_static(args.output, args.username)
    except (OSError, RuntimeError) as e:
        logger.error('Static build failed: %s', e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
