"""
translit-qa Scenario Corpus

Loads the ordered scenario collection from YAML. The packaged default
corpus lives in translit_qa/data/scenarios.yaml.
"""

import logging
from collections.abc import Iterable, Iterator
from importlib import resources
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from translit_qa.core.exceptions import CorpusError
from translit_qa.core.state import ScenarioKind, ScenarioRecord

logger = logging.getLogger(__name__)

DEFAULT_CORPUS = "scenarios.yaml"


class Corpus:
    """Immutable, ordered collection of scenario records with unique ids."""

    def __init__(self, records: Iterable[ScenarioRecord]):
        self._records = tuple(records)
        seen = set()
        for record in self._records:
            if record.id in seen:
                raise CorpusError(
                    f"Duplicate scenario id: {record.id}",
                    details={"id": record.id},
                )
            seen.add(record.id)

    def __iter__(self) -> Iterator[ScenarioRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, scenario_id: str) -> ScenarioRecord:
        for record in self._records:
            if record.id == scenario_id:
                return record
        raise KeyError(scenario_id)

    @property
    def ids(self) -> list[str]:
        return [r.id for r in self._records]

    def select(
        self,
        ids: Optional[Iterable[str]] = None,
        kind: Optional[ScenarioKind] = None,
    ) -> "Corpus":
        """
        Return a sub-corpus keeping the original order.

        Args:
            ids: Only keep these scenario ids
            kind: Only keep scenarios of this kind

        Raises:
            CorpusError: If an id is not part of the corpus
        """
        records = list(self._records)
        if ids is not None:
            wanted = set(ids)
            missing = wanted - set(self.ids)
            if missing:
                raise CorpusError(
                    "Unknown scenario ids",
                    details={"ids": sorted(missing)},
                )
            records = [r for r in records if r.id in wanted]
        if kind is not None:
            records = [r for r in records if r.kind == kind]
        return Corpus(records)


def parse_corpus(data: dict) -> Corpus:
    """Build a Corpus from the parsed YAML document."""
    if not isinstance(data, dict) or not isinstance(data.get("scenarios"), list):
        raise CorpusError("Corpus document must contain a 'scenarios' list")

    records = []
    for index, raw in enumerate(data["scenarios"]):
        try:
            records.append(ScenarioRecord.model_validate(raw))
        except PydanticValidationError as e:
            raise CorpusError(
                f"Invalid scenario at position {index}",
                details={"errors": e.errors(include_url=False)},
            ) from e

    return Corpus(records)


def load_corpus(path: Optional[Union[str, Path]] = None) -> Corpus:
    """
    Load a corpus file, or the packaged default corpus.

    Args:
        path: YAML file to load; None loads the packaged corpus

    Returns:
        Corpus in file order
    """
    try:
        if path is None:
            text = (
                resources.files("translit_qa.data")
                .joinpath(DEFAULT_CORPUS)
                .read_text(encoding="utf-8")
            )
        else:
            text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise CorpusError(f"Cannot read corpus: {e}", details={"path": str(path)}) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CorpusError(f"Corpus is not valid YAML: {e}") from e

    corpus = parse_corpus(data)
    logger.info(f"Loaded {len(corpus)} scenarios from {path or DEFAULT_CORPUS}")
    return corpus
