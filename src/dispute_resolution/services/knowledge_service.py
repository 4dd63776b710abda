import re
from functools import lru_cache
from typing import Any, Dict, List, Optional, Protocol

import httpx

from dispute_resolution.config import settings
from dispute_resolution.llm.prompts import CONTRACT_QUERY
from dispute_resolution.schemas import Contract, KnowledgeBundle, SearchResult, Vendor
from dispute_resolution.services.context_service import format_contract_context
from dispute_resolution.utils.logging import logger


NOT_SPECIFIED = "Not specified"
NO_SPECIAL_CLAUSES = "No special clauses found"

# (field label, fallback keyword)
_FIELDS = {
    "contract_number": ("contract number", "contract"),
    "vendor_name": ("vendor name", "vendor"),
    "payment_terms": ("payment terms", "net"),
    "service_description": ("service description", "services"),
    "dispute_resolution": ("dispute resolution", "process"),
    "effective_date": ("effective date", "date"),
    "expiration_date": ("expiration date", "expires"),
}

_LIST_ITEM = re.compile(r"^[ \t]*(?:[-*•]|\d+\.)[ \t]+(\S.*?)[ \t]*$", re.MULTILINE)


class KnowledgeSearch(Protocol):
    def search(self, query: str, max_results: int) -> Optional[SearchResult]:
        ...


# =================================================
# Senso client
# =================================================

class SensoClient:
    """
    Minimal client for the Senso knowledge base.

    Missing credentials are not an error: calls log a warning and return None.
    Transport and HTTP errors raise httpx exceptions.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.SENSO_API_KEY
        self._base_url = (base_url or settings.SENSO_API_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.SENSO_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            resp = client.post(
                f"{self._base_url}{path}",
                headers={
                    "X-API-Key": self._api_key,
                    "Content-Type": "application/json",
                },
                json=payload,
            )
            resp.raise_for_status()
            return resp.json()

    def search(self, query: str, max_results: int) -> Optional[SearchResult]:
        if not self.configured:
            logger.warning("Senso API key not configured, skipping search")
            return None

        data = self._post("/search", {"query": query, "max_results": max_results})
        return SearchResult.model_validate(data)

    def upload_content(
        self,
        *,
        title: str,
        summary: str,
        text: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        if not self.configured:
            logger.warning("Senso API key not configured, skipping upload")
            return None

        data = self._post(
            "/content/raw",
            {
                "title": title,
                "summary": summary,
                "text": text,
                "metadata": metadata or {},
            },
        )
        return data.get("id")


@lru_cache(maxsize=1)
def get_search_client() -> SensoClient:
    return SensoClient()


# =================================================
# Heuristic field extraction
# =================================================

def build_contract_query(invoice_number: str, vendor_email: Optional[str] = None) -> str:
    vendor_clause = f" from vendor {vendor_email}" if vendor_email else ""
    return CONTRACT_QUERY.format(invoice_number=invoice_number, vendor_clause=vendor_clause)


def extract_field(text: str, label: str, fallback_keyword: str) -> str:
    """
    Best-effort field lookup.

    1. "<label>: <value>" up to the next newline or period.
    2. Otherwise the text from the first occurrence of the fallback keyword
       to the end of that line.
    3. Otherwise "Not specified".

    Step 2 can pick up an unrelated sentence; the result is advisory only.
    """
    labelled = re.search(
        rf"{re.escape(label)}[:\s]+([^\n.]+)", text, re.IGNORECASE
    )
    if labelled and labelled.group(1).strip():
        return labelled.group(1).strip()

    keyword = re.search(rf"{re.escape(fallback_keyword)}[^\n]*", text, re.IGNORECASE)
    if keyword:
        return keyword.group(0).strip()

    return NOT_SPECIFIED


def extract_special_clauses(text: str) -> List[str]:
    """
    Bullet ("-", "*", "•") and numbered list lines, in document order.
    """
    items = [m.group(1) for m in _LIST_ITEM.finditer(text)]
    return items or [NO_SPECIAL_CLAUSES]


def parse_contract_bundle(result: SearchResult) -> KnowledgeBundle:
    answer = result.answer
    fields = {
        name: extract_field(answer, label, keyword)
        for name, (label, keyword) in _FIELDS.items()
    }

    return KnowledgeBundle(
        **fields,
        special_clauses=extract_special_clauses(answer),
        raw_context="\n\n".join(s.content for s in result.sources),
    )


# =================================================
# Public API
# =================================================

def query_contract_by_invoice(
    invoice_number: str,
    vendor_email: Optional[str] = None,
    *,
    search: Optional[KnowledgeSearch] = None,
    max_results: Optional[int] = None,
) -> Optional[KnowledgeBundle]:
    """
    Look up contract facts for an invoice.

    Never raises: missing credentials, transport errors and empty result
    sets all resolve to None so the caller uses local contract data.
    """
    search = search or get_search_client()
    max_results = max_results or settings.SENSO_MAX_RESULTS

    logger.info(
        f"Querying knowledge base for contract | Invoice={invoice_number} | "
        f"Vendor={vendor_email}"
    )

    try:
        result = search.search(build_contract_query(invoice_number, vendor_email), max_results)
    except Exception as exc:
        logger.warning(f"Knowledge base search failed for invoice {invoice_number}: {exc}")
        return None

    if not result or result.is_empty:
        logger.warning(f"No contract information found in knowledge base for invoice {invoice_number}")
        return None

    bundle = parse_contract_bundle(result)

    logger.info(
        f"Contract retrieved from knowledge base | "
        f"Contract={bundle.contract_number} | Vendor={bundle.vendor_name}"
    )
    return bundle


def query_terms(
    invoice_number: str,
    question: str,
    *,
    search: Optional[KnowledgeSearch] = None,
    max_results: Optional[int] = None,
) -> Optional[str]:
    """
    Ad-hoc question about an invoice's contract. Returns the raw answer.
    """
    search = search or get_search_client()
    max_results = max_results or settings.SENSO_MAX_RESULTS

    try:
        result = search.search(f"For invoice {invoice_number}: {question}", max_results)
    except Exception as exc:
        logger.warning(f"Knowledge base terms query failed for invoice {invoice_number}: {exc}")
        return None

    if not result or result.is_empty:
        logger.warning(
            f"No information found for terms query | Invoice={invoice_number} | Query={question}"
        )
        return None

    return result.answer


def upload_contract(
    contract: Contract,
    vendor: Vendor,
    *,
    client: Optional[SensoClient] = None,
) -> Optional[str]:
    """
    Index a contract in the knowledge base. Returns the content id.
    """
    client = client or get_search_client()

    logger.info(f"Uploading contract {contract.contract_number} for {vendor.name}")

    try:
        content_id = client.upload_content(
            title=f"Contract {contract.contract_number} - {vendor.name}",
            summary=f"Vendor contract {contract.contract_number} for {vendor.name}",
            text=f"Vendor Name: {vendor.name}\n{format_contract_context(contract)}",
            metadata={
                "contractNumber": contract.contract_number,
                "vendorId": vendor.id,
                "vendorName": vendor.name,
                "vendorEmail": vendor.email,
            },
        )
    except httpx.HTTPError as exc:
        logger.error(f"Failed to upload contract {contract.contract_number}: {exc}")
        return None

    if content_id:
        logger.info(f"Contract {contract.contract_number} uploaded | ContentId={content_id}")
    return content_id
