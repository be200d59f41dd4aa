"""Configuration for TheLeague / AFL Fantasy league API."""

from datetime import time
from zoneinfo import ZoneInfo

# Leagues served by this app, keyed by URL slug
LEAGUES = {
    "theleague": {
        "id": "13522",
        "name": "TheLeague",
        "franchise_count": 16,
    },
    "afl": {
        "id": "19621",
        "name": "AFL Fantasy",
        "franchise_count": 16,
    },
}

# Contract management is only enabled for the production league and the test league
CONTRACT_LEAGUE_IDS = ("13522", "18202")

# MyFantasyLeague export API
MFL_API_BASE = "https://api.myfantasyleague.com"
REQUEST_TIMEOUT = 30.0

# Cache TTL in seconds
CACHE_TTL = 300  # 5 minutes

# Salary cap rules
SALARY_CAP = 45_000_000
RESERVE_FOR_ROOKIES = 5_000_000
ANNUAL_ESCALATION = 0.10  # every salary goes up 10% on Feb 15
CAP_YEARS = 5  # current season + four future seasons shown on the cap table

# Fraction of salary counted against the cap, by roster tier
CAP_INCLUSION = {
    "active": {"current": 1.0, "future": 1.0},
    "practice": {"current": 0.5, "future": 1.0},
    "injured": {"current": 1.0, "future": 1.0},
}

# Dead money charged the season after a release, by years left on the contract.
# The release season itself is always charged 50%.
DEAD_MONEY_CURRENT_PERCENT = 0.5
DEAD_MONEY_FUTURE_PERCENT = {
    1: 0.0,
    2: 0.15,
    3: 0.25,
    4: 0.35,
    5: 0.45,
}

# Extensions are priced off the top-5 salaries at the position
EXTENSION_YEARS = 2

# Contract years allowed on a submission
CONTRACT_MIN_YEARS = 1
CONTRACT_MAX_YEARS = 5

# Contract windows and the league year are defined in Pacific time.
# Naive datetimes are read as league-local wall clock.
LEAGUE_TZ = ZoneInfo("America/Los_Angeles")

# Offseason contract window: Feb 15 through the 3rd Sunday in August at 8:45 PM
OFFSEASON_START = (2, 15)
OFFSEASON_DEADLINE_TIME = time(20, 45)
# In-season window: Sept 1 through Feb 14 of the following year
IN_SEASON_START = (9, 1)
IN_SEASON_END = (2, 14)

# League year rolls over on Feb 14 at 8:45 AM league time
LEAGUE_YEAR_CUTOFF = (2, 14, time(8, 45))

# Draft structure
DRAFT_ROUNDS = 3

# Canonical roster sort order; anything else sorts last
POSITION_ORDER = ("QB", "RB", "WR", "TE", "PK", "DEF")

# Toilet bowl bonus picks: (round, pick in round, ladder level)
TOILET_BOWL_SLOTS = (
    (1, 17, "winner"),
    (2, 17, "consolation"),
    (2, 18, "consolation2"),
)

# Playoff bracket ids of the toilet bowl ladder
TOILET_BOWL_BRACKET_IDS = {
    4: "winner",
    5: "consolation",
    6: "consolation2",
}

# Tier names used by older bracket exports without a bracket id
TOILET_BOWL_TIER_NAMES = {
    "The Toilet Bowl": "winner",
    "Toilet Bowl": "winner",
    "The Toilet Bowl Consolation": "consolation",
    "Toilet Bowl Consolation": "consolation",
    "The Toilet Bowl Consolation 2": "consolation2",
    "Toilet Bowl Consolation 2": "consolation2",
}

# Age chart palette, youngest bucket first
AGE_DISTRIBUTION_COLORS = [
    "#22c55e",  # green
    "#84cc16",  # lime
    "#eab308",  # yellow
    "#f97316",  # orange
    "#ef4444",  # red
]
