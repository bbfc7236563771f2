"""Standalone script to hit openFDA through OpenFDAClient and inspect raw envelopes."""

import asyncio
import json
import logging
import sys

from drug_safety_mcp.constants import REACTION_COUNT_FIELD
from drug_safety_mcp.data_sources.fda import OpenFDAClient
from drug_safety_mcp.services.query_builder import (
    build_drug_search,
    build_label_search,
    build_recall_search,
)

logging.basicConfig(level=logging.INFO, stream=sys.stderr)
logger = logging.getLogger(__name__)

DRUG_NAME = sys.argv[1] if len(sys.argv) > 1 else "metformin"


async def main() -> None:
    async with OpenFDAClient() as client:
        logger.info("--- count_events (reactions) for '%s' ---", DRUG_NAME)
        top = await client.count_events(
            build_drug_search(DRUG_NAME), count=REACTION_COUNT_FIELD, limit=10
        )
        print(json.dumps(top.model_dump(), indent=2))

        logger.info("--- search_events for '%s' ---", DRUG_NAME)
        events = await client.search_events(build_drug_search(DRUG_NAME), limit=2)
        print(json.dumps(events.model_dump(), indent=2))

        logger.info("--- search_labels for '%s' ---", DRUG_NAME)
        labels = await client.search_labels(build_label_search(DRUG_NAME))
        print(json.dumps(labels.meta.model_dump() if labels.meta else {}, indent=2))

        logger.info("--- search_enforcement for '%s' ---", DRUG_NAME)
        recalls = await client.search_enforcement(build_recall_search(DRUG_NAME), limit=3)
        print(json.dumps(recalls.model_dump(), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
