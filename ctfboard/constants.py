"""Constants for the CTF leaderboard."""

# Upstream resources the dashboard is allowed to read
USERS_ENDPOINT = '/users'
SCOREBOARD_ENDPOINT = '/scoreboard'
CHALLENGES_ENDPOINT = '/challenges'
AWARDS_ENDPOINT = '/awards'
TEAM_ENDPOINT_PREFIX = '/teams/'

STATIC_ENDPOINTS = (
    USERS_ENDPOINT,
    SCOREBOARD_ENDPOINT,
    CHALLENGES_ENDPOINT,
    AWARDS_ENDPOINT,
)

# Resources fetched on every poll cycle
POLL_ENDPOINTS = (
    SCOREBOARD_ENDPOINT,
    USERS_ENDPOINT,
    CHALLENGES_ENDPOINT,
    AWARDS_ENDPOINT,
)

DEFAULT_PROXY_ENDPOINT = USERS_ENDPOINT

# Rank bands
TOP_BAND_SIZE = 3
MID_BAND_SIZE = 10
MID_BAND_START = TOP_BAND_SIZE
MID_BAND_END = TOP_BAND_SIZE + MID_BAND_SIZE  # exclusive index, i.e. rank 13

POLL_INTERVAL_SECONDS = 30.0

# Keyword CTFd puts in messages for endpoints the credentials can't read
PERMISSION_KEYWORD = 'permission'

AUTH_TOKEN = 'token'
AUTH_COOKIE = 'cookie'
AUTH_NONE = 'none'

UNKNOWN_TEAM_NAME = 'Unknown Team'
LEADERBOARD_ERROR_MESSAGE = 'Unable to fetch team data from CTFd API'
PROXY_ERROR_MESSAGE = 'Failed to fetch data from CTFd API'
