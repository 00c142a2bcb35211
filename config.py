import os

from dotenv import load_dotenv

from engine.state import AggregationConfig

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


API_KEY = os.getenv("RIOT_API_KEY", "")

PATCH = os.getenv("PATCH", "15.4")
PLATFORMS = [p.strip().upper() for p in os.getenv("PLATFORMS", "NA1,EUW1,KR").split(",") if p.strip()]

SEED_SUMMONERS = _int_env("SEED_SUMMONERS", 1500)  # accounts sampled per platform
MATCHES_PER = _int_env("MATCHES_PER", 20)  # recent matches per puuid
MAX_AGE_DAYS = _int_env("MAX_AGE_DAYS", 7)  # 0 disables the recency window

MIN_PICKS = _int_env("MIN_PICKS", 200)
MIN_PICKS_ITEM_COMBO = _int_env("MIN_PICKS_ITEM_COMBO", 50)
TOP_COMBOS_PER_UNIT = _int_env("TOP_COMBOS_PER_UNIT", 10)

DATA_DIR = os.getenv("DATA_DIR", "data")
STAGING_DIR = os.path.join(DATA_DIR, "staging", "all")
SEEN_IDS_PATH = os.path.join(DATA_DIR, "state", "seen_match_ids.json")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def aggregation_config() -> AggregationConfig:
    return AggregationConfig(
        patch=PATCH,
        min_picks_comp=MIN_PICKS,
        min_picks_item_combo=MIN_PICKS_ITEM_COMBO,
        top_combos_per_unit=TOP_COMBOS_PER_UNIT,
    )
