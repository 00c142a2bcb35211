import logging

import config
from engine.meta_store import build_snapshot, write_snapshot
from engine.staging import read_staged_slices
from engine.stats_engine import aggregate_slices

logger = logging.getLogger("aggregate_staged")


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format="%(message)s")
    cfg = config.aggregation_config()

    slices = read_staged_slices(config.STAGING_DIR, cfg.patch)
    logger.info(f"[Staging] {len(slices)} slices for patch {cfg.patch}")

    state = aggregate_slices(slices, cfg.patch)
    payload = build_snapshot(state, cfg)
    versioned, current = write_snapshot(payload, config.DATA_DIR, cfg.patch)
    print(
        f"Wrote {versioned} and {current}: "
        f"{len(payload['comps_top20'])} comps, {len(payload['unit_item_meta'])} units"
    )


if __name__ == "__main__":
    main()
