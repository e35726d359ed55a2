import asyncio

import pytest
from fastapi.testclient import TestClient

import app as app_module
import render
from papers_module import load_papers_section
from spaceweather_module import SpaceWeatherState, build_space_weather_context

FLARE = {'current_class': 'X1.1', 'max_xrlong': 1.1e-4, 'begin_time': '2026-10-19T09:00:00Z'}
FORECAST = [{'date': '2026-10-19', 'c_class_1_day': 75, 'm_class_1_day': 25, 'x_class_1_day': 5}]


@pytest.fixture
def client(monkeypatch, sample_repos):
    from github_module import build_repo_cards, compute_github_stats

    def fake_github(username=None):
        return dict(username=username or 'griffin-goodwin',
                    stats=compute_github_stats(sample_repos),
                    repos=build_repo_cards(sample_repos), error=None)

    fetches = []

    async def fake_fetch():
        fetches.append(1)
        return build_space_weather_context(FLARE, FORECAST, None,
                                           sxr_image_url='https://example.org/sxr.gif')

    monkeypatch.setattr(render, 'load_github_section', fake_github)
    monkeypatch.setattr(app_module, 'load_github_section', fake_github)
    monkeypatch.setattr(app_module, 'space_weather_state', SpaceWeatherState(fake_fetch))
    test_client = TestClient(app_module.app)
    test_client.fetches = fetches
    return test_client


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'


def test_home_renders_every_section(client):
    response = client.get('/')
    assert response.status_code == 200
    page = response.text
    assert 'class="stats-card"' in page
    assert page.count('class="project-card fade-in"') == 4
    assert 'No description available' in page
    assert 'FOXES: A Framework For Operational X-ray Emission Synthesis' in page
    assert page.count('class="paper-card fade-in"') == 3
    assert 'Read more' in page
    assert 'flare-class-x' in page
    assert '1.10e-04 W/m²' in page
    assert 'X-Class Probability: <strong>5%</strong>' in page
    assert 'Refresh Data' in page
    assert 'Data auto-refreshes every 5 minutes' in page
    assert 'id="sxr-modal"' in page


def test_refresh_forces_new_fetch(client):
    client.get('/')
    client.get('/')
    assert len(client.fetches) == 1
    client.get('/?refresh=1')
    assert len(client.fetches) == 2


def test_spaceweather_fragment(client):
    response = client.get('/spaceweather')
    assert response.status_code == 200
    assert 'Latest Flare Event' in response.text
    assert '<html' not in response.text


def test_github_api(client):
    data = client.get('/api/v1/github').json()
    assert data['stats']['total_stars'] == 18
    assert data['repos'][0]['name'] == 'foxes'


def test_papers_api(client):
    data = client.get('/api/v1/papers').json()
    assert data['error'] is None
    assert [p['abstract_id'] for p in data['papers']] == ['abstract-0', 'abstract-1', 'abstract-2']


def test_spaceweather_api(client):
    data = client.get('/api/v1/spaceweather').json()
    assert data['flare']['flare_class'] == 'X1.1'
    assert data['forecast']['m_class'] == '25%'


def test_github_failure_shows_fallback_text(client, monkeypatch):
    def broken(username=None):
        return dict(username='griffin-goodwin', stats=None, repos=[],
                    error='Unable to load GitHub repositories. Please try again later.')

    monkeypatch.setattr(render, 'load_github_section', broken)
    page = client.get('/').text
    assert 'Unable to load GitHub repositories. Please try again later.' in page
    assert 'class="stats-card"' not in page


def test_placeholder_warning(client, monkeypatch):
    async def fallback():
        return build_space_weather_context(show_fallback=True)

    monkeypatch.setattr(app_module, 'space_weather_state', SpaceWeatherState(fallback))
    page = client.get('/').text
    assert 'Live data temporarily unavailable' in page
    assert 'Image unavailable.' in page


def test_page_shows_last_updated(client):
    page = client.get('/').text
    assert 'Last updated: ' in page
    assert 'class="spaceweather-updated"' in page


def loop_watching_loader(seen):
    def loader(papers=None, papers_dir=None):
        try:
            asyncio.get_running_loop()
            seen.append('event loop')
        except RuntimeError:
            seen.append('worker thread')
        return load_papers_section(papers=papers, papers_dir=papers_dir)
    return loader


def test_papers_load_off_the_event_loop(client, monkeypatch):
    seen = []
    loader = loop_watching_loader(seen)
    monkeypatch.setattr(render, 'load_papers_section', loader)
    monkeypatch.setattr(app_module, 'load_papers_section', loader)

    assert client.get('/').status_code == 200
    assert client.get('/api/v1/papers').json()['error'] is None
    assert seen == ['worker thread', 'worker thread']
