AMERICAS_PLATFORMS = {"NA1", "BR1", "LA1", "LA2"}
EUROPE_PLATFORMS = {"EUW1", "EUN1", "TR1", "RU"}


def region_for(platform: str) -> str:
    p = platform.upper()
    if p in AMERICAS_PLATFORMS:
        return "AMERICAS"
    if p in EUROPE_PLATFORMS:
        return "EUROPE"
    return "ASIA"  # KR, JP1, OC1


def platform_host(platform: str) -> str:
    return f"https://{platform.lower()}.api.riotgames.com"


def region_host(region: str) -> str:
    return f"https://{region.lower()}.api.riotgames.com"
