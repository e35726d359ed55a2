from data_urls import (CORS_PROXIES, SDO_LATEST_IMAGE_URL, SDO_SITE_URL,
                       SOLAR_PROBABILITIES_URL, SWPC_SITE_URL,
                       SXR_OVERVIEW_IMAGE_URL, SXR_OVERVIEW_LARGE_IMAGE_URL,
                       XRAY_FLARES_LATEST_URL, XRAYS_6_HOUR_URL)
import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import quote

import httpx

import settings
from sxr_chart import build_sxr_chart

logger = logging.getLogger(__name__)

NOT_AVAILABLE = 'N/A'

# Relays that expect the target URL percent-encoded
ENCODING_PROXIES = ('allorigins', 'codetabs')


class SpaceWeatherFetchError(Exception):
    pass


# --- Helper Functions ---


def parse_time(value):
    """Parses SWPC time tags ('2024-05-01T12:00:00Z', '2024-05-01 12:00:00.000')."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_time(value):
    if not value:
        return NOT_AVAILABLE
    parsed = parse_time(value)
    if parsed is None:
        return str(value)
    return parsed.astimezone(settings.display_tz()).strftime('%Y-%m-%d %H:%M:%S %Z')


def build_proxy_url(proxy, url):
    if any(name in proxy for name in ENCODING_PROXIES):
        return f'{proxy}{quote(url, safe="")}'
    return f'{proxy}{url}'


def _decode_json(response):
    if response.status_code < 200 or response.status_code >= 300:
        raise SpaceWeatherFetchError(f'HTTP error! status: {response.status_code}')

    text = response.text
    if text.strip().startswith('<'):
        raise SpaceWeatherFetchError('Received HTML instead of JSON. API may be unavailable.')
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SpaceWeatherFetchError(f'Invalid JSON response: {e}') from e


async def fetch_direct(client, url):
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        raise SpaceWeatherFetchError(f'Request to {url} failed: {e}') from e
    return _decode_json(response)


async def fetch_with_proxy(client, url, proxy_index=0):
    """Fetches JSON from `url` through relay number `proxy_index`."""
    proxy = CORS_PROXIES[proxy_index % len(CORS_PROXIES)]
    full_url = build_proxy_url(proxy, url)
    try:
        response = await client.get(full_url)
    except httpx.HTTPError as e:
        raise SpaceWeatherFetchError(f'Request to {full_url} failed: {e}') from e
    return _decode_json(response)


async def fetch_json_via_relays(client, url, label, direct_first=None):
    """Tries the feed directly (optionally), then each relay in order.

    Returns the first decoded payload, or None when every attempt failed.
    """
    if direct_first is None:
        direct_first = settings.SPACEWEATHER_DIRECT_FIRST

    if direct_first:
        try:
            data = await fetch_direct(client, url)
            logger.info(f'Successfully fetched {label} from {url}')
            return data
        except SpaceWeatherFetchError as e:
            logger.warning(f'Direct request failed for {label}: {e}')

    for i in range(len(CORS_PROXIES)):
        try:
            data = await fetch_with_proxy(client, url, i)
            logger.info(f'Successfully fetched {label} via proxy {i}')
            return data
        except SpaceWeatherFetchError as e:
            logger.warning(f'Proxy {i} failed for {label}: {e}')

    logger.error(f'All relays failed for {label}')
    return None


async def resolve_sxr_overview_image(client, image_url=SXR_OVERVIEW_IMAGE_URL):
    """Returns the first URL the overview image loads from, or None."""
    candidates = [
        image_url,
        build_proxy_url(CORS_PROXIES[0], image_url),
        CORS_PROXIES[1] + quote(image_url, safe=''),
    ]
    for candidate in candidates:
        try:
            response = await client.get(candidate)
        except httpx.HTTPError as e:
            logger.warning(f'SXR overview image failed from {candidate}: {e}')
            continue
        if response.is_success:
            return candidate
        logger.warning(f'SXR overview image failed from {candidate}: status {response.status_code}')
    return None


def get_sdo_aia_image_url(flare_time=None):
    # SDO only publishes a rolling "latest" image, whatever the flare time
    return SDO_LATEST_IMAGE_URL


def _first_record(payload):
    if isinstance(payload, list):
        return payload[0] if payload and isinstance(payload[0], dict) else None
    if isinstance(payload, dict):
        return payload
    return None


def summarize_flare(latest_flare):
    summary = {
        'flare_class': NOT_AVAILABLE,
        'flare_class_css': 'flare-class-n',
        'begin_time': NOT_AVAILABLE,
        'peak_time': NOT_AVAILABLE,
        'end_time': NOT_AVAILABLE,
        'max_flux': NOT_AVAILABLE,
    }
    flare = _first_record(latest_flare)
    if not flare:
        return summary

    flare_class = (flare.get('current_class') or flare.get('max_class')
                   or flare.get('begin_class') or flare.get('end_class') or NOT_AVAILABLE)
    max_flux = flare.get('max_xrlong') or flare.get('current_int_xrlong') or NOT_AVAILABLE
    if isinstance(max_flux, (int, float)) and not isinstance(max_flux, bool):
        max_flux = f'{max_flux:.2e} W/m²'

    summary.update(
        flare_class=str(flare_class),
        flare_class_css=f'flare-class-{str(flare_class)[:1].lower()}',
        begin_time=format_time(flare.get('begin_time')),
        peak_time=format_time(flare.get('max_time')),
        end_time=format_time(flare.get('end_time')),
        max_flux=max_flux,
    )
    return summary


def _percent(record, key):
    if key not in record or record[key] is None:
        return NOT_AVAILABLE
    return f'{record[key]}%'


def summarize_forecast(flare_forecast):
    summary = {
        'x_class': NOT_AVAILABLE,
        'm_class': NOT_AVAILABLE,
        'c_class': NOT_AVAILABLE,
        'forecast_time': NOT_AVAILABLE,
    }
    forecast = _first_record(flare_forecast)
    if not forecast:
        return summary

    summary.update(
        x_class=_percent(forecast, 'x_class_1_day'),
        m_class=_percent(forecast, 'm_class_1_day'),
        c_class=_percent(forecast, 'c_class_1_day'),
        forecast_time=format_time(forecast.get('date')),
    )
    return summary


def long_channel(xray_data):
    """Keeps the 0.1-0.8 nm channel when the feed carries both GOES channels."""
    if not isinstance(xray_data, list):
        return xray_data
    if not any(isinstance(p, dict) and 'energy' in p for p in xray_data):
        return xray_data
    return [p for p in xray_data if isinstance(p, dict) and p.get('energy') == '0.1-0.8nm']


def build_space_weather_context(latest_flare=None, flare_forecast=None, xray_data=None,
                                sxr_image_url=None, show_fallback=False, now=None):
    if show_fallback:
        latest_flare = flare_forecast = xray_data = None
        sxr_image_url = None

    return {
        'show_fallback': show_fallback,
        'flare': summarize_flare(latest_flare),
        'forecast': summarize_forecast(flare_forecast),
        'chart': build_sxr_chart(long_channel(xray_data), now=now),
        'sxr_image_url': sxr_image_url,
        'sxr_image_direct_url': SXR_OVERVIEW_IMAGE_URL,
        'sxr_image_large_url': SXR_OVERVIEW_LARGE_IMAGE_URL,
        'sdo_image_url': get_sdo_aia_image_url(),
        'sdo_site_url': SDO_SITE_URL,
        'swpc_site_url': SWPC_SITE_URL,
        'refresh_minutes': settings.SPACEWEATHER_REFRESH_MINUTES,
        'last_updated': format_time(datetime.now(timezone.utc).isoformat()),
    }


async def fetch_space_weather(client=None):
    """Fetches all space weather feeds and returns the display context.

    Never raises: any unexpected failure yields the placeholder context.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS,
                                   follow_redirects=True)
    try:
        latest_flare, flare_forecast, xray_data, sxr_image_url = await asyncio.gather(
            fetch_json_via_relays(client, XRAY_FLARES_LATEST_URL, 'latest flare'),
            fetch_json_via_relays(client, SOLAR_PROBABILITIES_URL, 'flare forecast'),
            fetch_json_via_relays(client, XRAYS_6_HOUR_URL, 'x-ray flux'),
            resolve_sxr_overview_image(client),
        )
        return build_space_weather_context(latest_flare, flare_forecast, xray_data, sxr_image_url)
    except Exception as e:
        logger.exception(f'Error fetching space weather: {e}')
        return build_space_weather_context(show_fallback=True)
    finally:
        if owns_client:
            await client.aclose()


class SpaceWeatherState:
    """Most recent space weather context.

    The scheduler refreshes it in the background; without the scheduler,
    get() re-fetches once the context is older than max_age.
    """

    def __init__(self, fetcher=fetch_space_weather, max_age=None):
        self._fetcher = fetcher
        self._lock = asyncio.Lock()
        if max_age is None:
            max_age = timedelta(minutes=settings.SPACEWEATHER_REFRESH_MINUTES)
        self.max_age = max_age
        self.context = None
        self.updated_at = None

    def is_stale(self):
        if self.context is None or self.updated_at is None:
            return True
        return datetime.now(timezone.utc) - self.updated_at >= self.max_age

    async def refresh(self, only_if_stale=False):
        async with self._lock:
            # another request may have refreshed while this one waited
            if only_if_stale and not self.is_stale():
                return self.context
            logger.info('---  space weather refresh start ---')
            self.context = await self._fetcher()
            self.updated_at = datetime.now(timezone.utc)
            logger.info('---  space weather refresh end  ---')
            return self.context

    async def get(self, force=False):
        if force:
            return await self.refresh()
        if self.is_stale():
            return await self.refresh(only_if_stale=True)
        return self.context


space_weather_state = SpaceWeatherState()
