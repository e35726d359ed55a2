import os
import logging
from datetime import timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

GITHUB_USERNAME = os.environ.get('GITHUB_USERNAME', 'griffin-goodwin')
GITHUB_TOKEN = os.environ.get('GITHUB_TOKEN', '').strip()
GITHUB_API_VERSION = os.environ.get('GITHUB_API_VERSION', '2022-11-28')
GITHUB_CACHE_FILE = os.environ.get('GITHUB_CACHE_FILE', 'github_repos_cache.json')
GITHUB_CACHE_SECONDS = int(os.environ.get('GITHUB_CACHE_SECONDS', '600'))

SPACEWEATHER_REFRESH_MINUTES = int(os.environ.get('SPACEWEATHER_REFRESH_MINUTES', '5'))
SPACEWEATHER_AUTO_REFRESH = os.environ.get('SPACEWEATHER_AUTO_REFRESH', '1') == '1'
SPACEWEATHER_DIRECT_FIRST = os.environ.get('SPACEWEATHER_DIRECT_FIRST', '1') == '1'

HTTP_TIMEOUT_SECONDS = float(os.environ.get('HTTP_TIMEOUT_SECONDS', '30'))

PAPERS_DIR = os.environ.get('PAPERS_DIR', 'Papers')
TEMPLATES_DIR = os.environ.get(
    'TEMPLATES_DIR', os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates'))
STATIC_DIR = os.environ.get(
    'STATIC_DIR', os.path.join(os.path.dirname(os.path.abspath(__file__)), 'static'))

DISPLAY_TZ = os.environ.get('TZ', 'UTC')


def display_tz():
    if DISPLAY_TZ.upper() == 'UTC':
        return timezone.utc
    try:
        return ZoneInfo(DISPLAY_TZ)
    except (ZoneInfoNotFoundError, ValueError):
        logging.warning('Unknown timezone %r, using UTC.', DISPLAY_TZ)
        return timezone.utc


LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()


def setup_logging():
    logging.basicConfig(
        format='%(asctime)s %(levelname)s: %(message)s',
        level=getattr(logging, LOG_LEVEL, logging.INFO))
