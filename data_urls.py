# data_urls.py

# GitHub REST API
GITHUB_API_BASE = 'https://api.github.com'
GITHUB_REPOS_PATH = '/users/{username}/repos'

# NOAA SWPC space weather feeds
XRAY_FLARES_LATEST_URL = 'https://services.swpc.noaa.gov/json/goes/primary/xray-flares-latest.json'
SOLAR_PROBABILITIES_URL = 'https://services.swpc.noaa.gov/json/solar_probabilities.json'
XRAYS_6_HOUR_URL = 'https://services.swpc.noaa.gov/json/goes/primary/xrays-6-hour.json'
SXR_OVERVIEW_IMAGE_URL = 'https://services.swpc.noaa.gov/images/swx-overview-small.gif'
SXR_OVERVIEW_LARGE_IMAGE_URL = 'https://services.swpc.noaa.gov/images/swx-overview.gif'
SWPC_SITE_URL = 'https://www.swpc.noaa.gov'

# Solar Dynamics Observatory
SDO_LATEST_IMAGE_URL = 'https://sdo.gsfc.nasa.gov/assets/img/latest/latest_1024_0193.jpg'
SDO_SITE_URL = 'https://sdo.gsfc.nasa.gov'

# Relays tried in order when a feed can't be reached directly
CORS_PROXIES = [
    'https://api.allorigins.win/raw?url=',
    'https://corsproxy.io/?',
    'https://api.codetabs.com/v1/proxy?quest=',
]
