from urllib.parse import quote

from api.http import riot_get
from api.routing import region_host


def get_match_ids_by_puuid(region: str, puuid: str, count: int):
    url = f"{region_host(region)}/tft/match/v1/matches/by-puuid/{quote(puuid, safe='')}/ids"
    return riot_get(url, params={"count": count})


def get_match(region: str, match_id: str):
    url = f"{region_host(region)}/tft/match/v1/matches/{match_id}"
    return riot_get(url)
