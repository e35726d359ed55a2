import os

# Must be set before settings is imported
os.environ['SPACEWEATHER_AUTO_REFRESH'] = '0'
os.environ['GITHUB_CACHE_FILE'] = ''
os.environ['PAPERS_DIR'] = os.path.join(os.path.dirname(__file__), 'no-papers-here')
os.environ['SPACEWEATHER_DIRECT_FIRST'] = '1'
os.environ['TZ'] = 'UTC'

import pytest  # noqa: E402


SAMPLE_REPOS = [
    {
        'name': 'foxes',
        'description': 'EUV to SXR flux synthesis',
        'language': 'Python',
        'stargazers_count': 12,
        'forks_count': 3,
        'html_url': 'https://github.com/griffin-goodwin/foxes',
    },
    {
        'name': 'notebooks',
        'description': None,
        'language': 'Jupyter Notebook',
        'stargazers_count': 1,
        'forks_count': 0,
        'html_url': 'https://github.com/griffin-goodwin/notebooks',
    },
    {
        'name': 'dotfiles',
        'description': 'config',
        'language': None,
        'stargazers_count': 0,
        'forks_count': 1,
        'html_url': 'https://github.com/griffin-goodwin/dotfiles',
    },
    {
        'name': 'flare-svm',
        'description': 'SVM flare forecasting',
        'language': 'Python',
        'stargazers_count': 5,
        'forks_count': 2,
        'html_url': 'https://github.com/griffin-goodwin/flare-svm',
    },
]


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else ''

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON object could be decoded')
        return self._payload


@pytest.fixture
def sample_repos():
    return [dict(repo) for repo in SAMPLE_REPOS]


@pytest.fixture
def fake_response():
    return FakeResponse
