import datetime
import logging
import os

import config
from api.collector import (
    collect_match_ids,
    fetch_matches,
    resolve_puuids,
    seed_summoner_ids,
    slices_from_matches,
)
from api.routing import region_for
from engine.staging import append_slices, load_seen_ids, save_seen_ids

logger = logging.getLogger("collect_slices")


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format="%(message)s")

    today = datetime.date.today().strftime("%Y%m%d")
    out_path = os.path.join(config.STAGING_DIR, f"participants-{today}.ndjson")
    seen = load_seen_ids(config.SEEN_IDS_PATH)

    total = 0
    for platform in config.PLATFORMS:
        region = region_for(platform)
        logger.info(f"[Platform] {platform} seeding...")
        puuids = resolve_puuids(platform, seed_summoner_ids(platform), cap=config.SEED_SUMMONERS)
        if not puuids:
            logger.warning(f"[PUUID] {platform} none resolved")
            continue

        new_ids = [mid for mid in collect_match_ids(region, puuids, per=config.MATCHES_PER) if mid not in seen]
        if not new_ids:
            continue

        matches = fetch_matches(region, new_ids)
        # staging keeps every patch; the aggregator filters later
        slices = slices_from_matches(matches, platform, region, max_age_days=config.MAX_AGE_DAYS)
        written = append_slices(out_path, slices)
        seen.update(dict.fromkeys(s.match_id for s in slices if s.match_id))
        logger.info(f"[Write] {platform} appended {written} slices to {out_path}")
        total += written

    save_seen_ids(config.SEEN_IDS_PATH, seen)
    print(f"Collected {total} slices -> {out_path}")
    if total == 0:
        logger.warning("[Collector] 0 slices appended, check PUUID/filter logs above")


if __name__ == "__main__":
    main()
