"""
Index every reference contract in the Senso knowledge base.
Run once during onboarding, with SENSO_API_KEY set.
"""

import sys

from dispute_resolution.config import settings
from dispute_resolution.reference.vendors import CONTRACTS, get_vendor_by_id
from dispute_resolution.services.knowledge_service import upload_contract
from dispute_resolution.utils.logging import configure_logging, logger


def main() -> int:
    configure_logging()

    if not settings.SENSO_API_KEY:
        logger.error("SENSO_API_KEY is not set; add it to your .env file")
        return 1

    failures = 0
    for contract in CONTRACTS:
        vendor = get_vendor_by_id(contract.vendor_id)
        if not vendor:
            logger.error(f"No vendor {contract.vendor_id} for contract {contract.contract_number}")
            failures += 1
            continue

        if not upload_contract(contract, vendor):
            failures += 1

    logger.info(f"Uploaded {len(CONTRACTS) - failures}/{len(CONTRACTS)} contracts")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
