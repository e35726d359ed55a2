import os
import socket
import logging
from contextlib import asynccontextmanager
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

import settings
from github_module import load_github_section
from papers_module import load_papers_section
from render import build_portfolio_context, render_portfolio, render_space_weather
from spaceweather_module import space_weather_state

# Set up logging
settings.setup_logging()


def start_scheduler():
    sched = AsyncIOScheduler()
    # Refresh space weather every few minutes
    sched.add_job(space_weather_state.refresh, trigger='interval',
                  minutes=settings.SPACEWEATHER_REFRESH_MINUTES,
                  id='spaceweather_refresh', coalesce=True, max_instances=1)
    sched.start()
    for job in sched.get_jobs():
        logging.info('Scheduled job: %s (%s)', job.id, job.trigger)
    return sched


@asynccontextmanager
async def lifespan(app):
    sched = None
    if settings.SPACEWEATHER_AUTO_REFRESH:
        sched = start_scheduler()
    yield
    if sched is not None:
        sched.shutdown(wait=False)


app = FastAPI(lifespan=lifespan)
app.mount('/static', StaticFiles(directory=settings.STATIC_DIR), name='static')
if os.path.isdir(settings.PAPERS_DIR):
    app.mount('/Papers', StaticFiles(directory=settings.PAPERS_DIR), name='papers')


def _client_host(request):
    return request.client.host if request.client else 'unknown'


# routes


@app.get('/', response_class=HTMLResponse)
async def home(request: Request, refresh: bool = False):
    logging.info('Portfolio page response to client: %s', _client_host(request))
    space_weather = await space_weather_state.get(force=refresh)
    context = await build_portfolio_context(space_weather=space_weather)
    return HTMLResponse(render_portfolio(context))


@app.get('/spaceweather', response_class=HTMLResponse)
async def spaceweather_fragment(request: Request, refresh: bool = False):
    logging.info('Space weather fragment response to client: %s', _client_host(request))
    space_weather = await space_weather_state.get(force=refresh)
    return HTMLResponse(render_space_weather(space_weather))


@app.get('/api/v1/github')
async def github_api(username: Optional[str] = None):
    return await run_in_threadpool(load_github_section, username)


@app.get('/api/v1/papers')
async def papers_api():
    return await run_in_threadpool(load_papers_section, papers_dir=settings.PAPERS_DIR)


@app.get('/api/v1/spaceweather')
async def spaceweather_api(refresh: bool = False):
    return await space_weather_state.get(force=refresh)


@app.get('/health')
async def health(request: Request):
    client = _client_host(request)
    logging.info('Health endpoint response to client %s', client)
    hostname = socket.gethostname()
    return dict(status='healthy', hostname=hostname)
