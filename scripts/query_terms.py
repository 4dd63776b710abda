"""
Ask the knowledge base an ad-hoc question about an invoice's contract.

    python scripts/query_terms.py INV-2024-0004 "What is the late fee?"
"""

import argparse
import sys

from dispute_resolution.services.knowledge_service import query_contract_by_invoice, query_terms
from dispute_resolution.utils.logging import configure_logging


def main() -> int:
    parser = argparse.ArgumentParser(description="Query contract terms for an invoice.")
    parser.add_argument("invoice_number")
    parser.add_argument("question", nargs="?", help="Free-form question; omit to fetch the contract bundle")
    parser.add_argument("--vendor-email", default=None)
    args = parser.parse_args()

    configure_logging()

    if args.question:
        answer = query_terms(args.invoice_number, args.question)
        if answer is None:
            print("No answer found.")
            return 1
        print(answer)
        return 0

    bundle = query_contract_by_invoice(args.invoice_number, args.vendor_email)
    if bundle is None:
        print("No contract found.")
        return 1
    print(bundle.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
