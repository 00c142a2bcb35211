from urllib.parse import quote

from api.http import riot_get
from api.routing import platform_host


def get_summoner_by_id(platform: str, summoner_id: str):
    url = f"{platform_host(platform)}/tft/summoner/v1/summoners/{quote(summoner_id, safe='')}"
    return riot_get(url)
