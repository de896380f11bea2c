"""Provider fingerprint registry for tko-subs."""

import csv
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

from .utils import parse_bool

logger = logging.getLogger(__name__)

FIELD_COUNT = 4


@dataclass(frozen=True)
class ProviderRecord:
    """A hosting provider fingerprint."""
    name: str
    cname_pattern: re.Pattern
    error_signature: re.Pattern
    use_http: bool

    @property
    def scheme(self) -> str:
        return "http" if self.use_http else "https"

    def matches_cname(self, cname: Optional[str]) -> bool:
        return bool(cname) and self.cname_pattern.search(cname) is not None

    def matches_body(self, body: str) -> bool:
        return self.error_signature.search(body) is not None


class ProviderRegistry:
    """
    Ordered, read-only collection of provider fingerprints.

    Records keep their source order: the scanner checks them in that order and
    stops at the first provider whose signature is confirmed. Patterns are
    compiled once here, so a malformed expression is reported while loading
    and never seen at scan time.
    """

    def __init__(self, records: Iterable[ProviderRecord] = ()):
        self._records = tuple(records)

    def __iter__(self) -> Iterator[ProviderRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> ProviderRecord:
        return self._records[index]

    @property
    def names(self) -> List[str]:
        return [record.name for record in self._records]

    @classmethod
    def from_file(cls, path: str) -> "ProviderRegistry":
        """
        Load fingerprints from a CSV file without a header row.

        Args:
            path: Path to the fingerprints file

        Returns:
            ProviderRegistry: Registry in file order

        Raises:
            OSError: If the file cannot be opened
        """
        with open(path, 'r', newline='') as f:
            registry = cls.from_rows(csv.reader(f), source=path)
        logger.info(f"Loaded {len(registry)} provider fingerprints from {path}")
        return registry

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]], source: str = "<rows>") -> "ProviderRegistry":
        records = []
        for line_no, row in enumerate(rows, start=1):
            if not row or not any(field.strip() for field in row):
                continue
            record = parse_record(row, f"{source}:{line_no}")
            if record:
                records.append(record)
        return cls(records)


def parse_record(row: Sequence[str], location: str = "") -> Optional[ProviderRecord]:
    """
    Build a ProviderRecord from a CSV row.

    Args:
        row: provider name, CNAME pattern, error signature, HTTP-only flag
        location: Source position used in warnings

    Returns:
        Optional[ProviderRecord]: None if the row is invalid
    """
    if len(row) != FIELD_COUNT:
        logger.warning(f"Skipping fingerprint at {location}: expected {FIELD_COUNT} fields, got {len(row)}")
        return None

    name, cname_pattern, error_signature, http_flag = row
    name = name.strip().lower()
    if not name:
        logger.warning(f"Skipping fingerprint at {location}: empty provider name")
        return None

    try:
        compiled_cname = re.compile(cname_pattern)
        compiled_signature = re.compile(error_signature)
    except re.error as e:
        logger.warning(f"Skipping {name} fingerprint at {location}: invalid pattern ({e})")
        return None

    return ProviderRecord(
        name=name,
        cname_pattern=compiled_cname,
        error_signature=compiled_signature,
        use_http=parse_bool(http_flag)
    )
