import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dispute_resolution.config import settings
from dispute_resolution.schemas import PipelineResult
from dispute_resolution.utils.logging import logger


class CaseStore:
    """
    Append-only directory of resolution cases, one JSON file per case id.
    Existing files are never overwritten.
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None) -> None:
        self.directory = Path(directory or settings.CASES_DIR)

    def path_for(self, case_id: str) -> Path:
        return self.directory / f"{case_id}.json"

    def save(self, result: PipelineResult) -> Path:
        case = result.resolution_case
        document = case.model_dump(mode="json")
        document["dispute"] = result.dispute.model_dump(mode="json")

        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(case.analysis.case_id)

        # "x" fails with FileExistsError rather than replacing a stored case
        with open(path, "x", encoding="utf-8") as f:
            json.dump(document, f, indent=2)

        logger.info(f"Case saved to {path}")
        return path

    def load(self, case_id: str) -> Dict[str, Any]:
        with open(self.path_for(case_id), "r", encoding="utf-8") as f:
            return json.load(f)
