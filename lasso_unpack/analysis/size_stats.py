"""
Per-package size summary for decoded bundles.

Groups ``def`` records by package version and reports how many module bodies each
package contributes, their raw size and their gzip-compressed size.
"""

import gzip
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from .models import CallKind, ManifestRecord, PackageSizeSummary

GZIP_LEVEL = 9


def gzip_size(text: str) -> int:
    """Size in bytes of text after gzip compression."""
    if not text:
        return 0
    return len(gzip.compress(text.encode("utf-8"), compresslevel=GZIP_LEVEL, mtime=0))


def summarize_sizes(records: Iterable[ManifestRecord]) -> List[PackageSizeSummary]:
    """Aggregate module definitions per (package, version), largest first."""
    groups: Dict[Tuple[str, str], List[ManifestRecord]] = defaultdict(list)
    for record in records:
        if record.verb is CallKind.DEF:
            groups[(record.package_name, record.version)].append(record)

    summaries = [
        PackageSizeSummary(
            package_name=package_name,
            version=version,
            module_count=len(members),
            total_size=sum(member.size for member in members),
            gzip_size=sum(gzip_size(member.content) for member in members),
        )
        for (package_name, version), members in groups.items()
    ]
    summaries.sort(key=lambda summary: (-summary.total_size, summary.package_name, summary.version))
    return summaries
