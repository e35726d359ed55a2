import asyncio
import logging
from datetime import datetime, timezone

from fastapi.templating import Jinja2Templates

import settings
from github_module import load_github_section
from papers_module import load_papers_section
from spaceweather_module import fetch_space_weather

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)


async def build_portfolio_context(username=None, space_weather=None):
    """Gathers every section of the page. Each section degrades on its own."""
    github = await asyncio.to_thread(load_github_section, username)
    papers = await asyncio.to_thread(load_papers_section, papers_dir=settings.PAPERS_DIR)
    if space_weather is None:
        space_weather = await fetch_space_weather()

    logger.info('Portfolio context built: %s repos, %s papers',
                len(github['repos']), len(papers['papers']))
    return {
        'github': github,
        'papers': papers,
        'spaceweather': space_weather,
        'generated_at': datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC'),
    }


def render_portfolio(context, static_prefix='/static', static_export=False):
    return templates.get_template('index.html').render(
        dict(context, static_prefix=static_prefix, static_export=static_export))


def render_space_weather(space_weather):
    return templates.get_template('spaceweather.html').render(spaceweather=space_weather)
