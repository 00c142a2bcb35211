from api.http import riot_get
from api.routing import platform_host

MASTER_PLUS_TIERS = ("CHALLENGER", "GRANDMASTER", "MASTER")
DIVISIONS = ("I", "II", "III", "IV")


def get_master_plus_entries(platform: str, tier: str):
    if tier not in MASTER_PLUS_TIERS:
        raise ValueError(f"not a master+ tier: {tier}")
    url = f"{platform_host(platform)}/tft/league/v1/{tier.lower()}"
    data = riot_get(url)
    return data.get("entries", [])


def get_league_entries(platform: str, tier: str, division: str, page: int):
    url = f"{platform_host(platform)}/tft/league/v1/entries/{tier}/{division}"
    return riot_get(url, params={"page": page})
