from data_urls import GITHUB_API_BASE, GITHUB_REPOS_PATH
import json
import logging
import os
from collections import Counter
from datetime import datetime

import requests

import settings

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = 'Unable to load GitHub repositories. Please try again later.'
DEFAULT_LANGUAGE_COLOR = '#6e7681'
TOP_LANGUAGES = 5

LANGUAGE_COLORS = {
    'JavaScript': '#f1e05a',
    'TypeScript': '#2b7489',
    'Python': '#3572A5',
    'Java': '#b07219',
    'C++': '#f34b7d',
    'C': '#555555',
    'C#': '#239120',
    'Ruby': '#701516',
    'Go': '#00ADD8',
    'Rust': '#dea584',
    'PHP': '#4F5D95',
    'Swift': '#fa7343',
    'Kotlin': '#F18E33',
    'HTML': '#e34c26',
    'CSS': '#563d7c',
    'Shell': '#89e051',
    'R': '#198CE7',
    'MATLAB': '#e16737',
    'Jupyter Notebook': '#DA5B0B',
}


class GitHubAPIError(RuntimeError):
    pass


def _headers():
    h = {
        'Accept': 'application/vnd.github+json',
        'User-Agent': 'solar-portfolio',
        'X-GitHub-Api-Version': settings.GITHUB_API_VERSION,
    }
    if settings.GITHUB_TOKEN:
        h['Authorization'] = f'Bearer {settings.GITHUB_TOKEN}'
    return h


def get_language_color(language):
    return LANGUAGE_COLORS.get(language, DEFAULT_LANGUAGE_COLOR)


def get_cached_repos(username, cache_file, max_age):
    """Reads the repo list from the cache file if it's recent and for the same user."""
    if not cache_file or not os.path.exists(cache_file):
        return None
    try:
        file_mod_time = os.path.getmtime(cache_file)
        if (datetime.now().timestamp() - file_mod_time) >= max_age:
            return None
        with open(cache_file, 'r') as f:
            cached = json.load(f)
        if cached.get('username') != username:
            logger.info('Ignoring cache written for another user.')
            return None
        logger.info('Serving GitHub repos from cache.')
        return cached.get('repos')
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f'Error reading cache file: {e}')
    return None


def save_repos_to_cache(username, repos, cache_file):
    if not cache_file:
        return
    try:
        with open(cache_file, 'w') as f:
            json.dump({'username': username, 'repos': repos}, f)
        logger.info(f'Saved {len(repos)} repos to cache file: {cache_file}')
    except OSError as e:
        logger.error(f'Error saving repos to cache file: {e}')


def fetch_github_repos(username, cache_file=None, max_age=None):
    """Returns the public repositories of `username`, most recently updated first.

    Raises GitHubAPIError when GitHub can't be reached or answers with an error.
    """
    if cache_file is None:
        cache_file = settings.GITHUB_CACHE_FILE
    if max_age is None:
        max_age = settings.GITHUB_CACHE_SECONDS

    cached = get_cached_repos(username, cache_file, max_age)
    if cached is not None:
        return cached

    url = GITHUB_API_BASE + GITHUB_REPOS_PATH.format(username=username)
    params = {'sort': 'updated', 'per_page': 100}
    logger.info('Getting GitHub repos for %s...', username)
    try:
        r = requests.get(url, headers=_headers(), params=params,
                         timeout=settings.HTTP_TIMEOUT_SECONDS)
    except requests.exceptions.RequestException as e:
        raise GitHubAPIError(f'Failed to fetch GitHub repositories: {e}') from e

    if not r.ok:
        raise GitHubAPIError(
            f'Failed to fetch GitHub repositories: {r.status_code} {r.text[:200]}')

    try:
        repos = r.json()
    except ValueError as e:
        raise GitHubAPIError(f'GitHub returned invalid JSON: {e}') from e
    if not isinstance(repos, list):
        raise GitHubAPIError('GitHub returned an unexpected payload.')

    logger.info('Loaded %s repos from %s', len(repos), url)
    save_repos_to_cache(username, repos, cache_file)
    return repos


def compute_github_stats(repos):
    language_counts = Counter()
    for repo in repos:
        if repo.get('language'):
            language_counts[repo['language']] += 1

    # sorted() is stable, so equal counts keep first-seen order
    languages = sorted(language_counts.items(), key=lambda item: item[1], reverse=True)

    return {
        'total_repos': len(repos),
        'total_stars': sum(repo.get('stargazers_count', 0) for repo in repos),
        'total_forks': sum(repo.get('forks_count', 0) for repo in repos),
        'languages': [
            {'name': name, 'count': count, 'color': get_language_color(name)}
            for name, count in languages[:TOP_LANGUAGES]
        ],
    }


def build_repo_cards(repos):
    cards = []
    for index, repo in enumerate(repos):
        language = repo.get('language')
        cards.append({
            'name': repo.get('name', ''),
            'description': repo.get('description') or 'No description available',
            'language': language,
            'language_color': get_language_color(language) if language else None,
            'stars': repo.get('stargazers_count', 0),
            'forks': repo.get('forks_count', 0),
            'html_url': repo.get('html_url', ''),
            'delay': round(index * 0.1, 1),
        })
    return cards


def load_github_section(username=None):
    """Builds the GitHub section context; never raises."""
    username = username or settings.GITHUB_USERNAME
    try:
        repos = fetch_github_repos(username)
    except GitHubAPIError as e:
        logger.error('Error fetching GitHub repos: %s', e)
        return dict(username=username, stats=None, repos=[], error=UNAVAILABLE_MESSAGE)

    return dict(
        username=username,
        stats=compute_github_stats(repos),
        repos=build_repo_cards(repos),
        error=None,
    )
