# File: services/analytics_service.py
from collections import Counter
from typing import Any, Dict, List

from utils.sanitization import to_text


TOP_TAGS_LIMIT = 10


def year_distribution(papers: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Paper counts per year, sorted by year text. Missing years count as 'Unknown'."""
    counts: Counter = Counter()
    for paper in papers:
        year = to_text(paper.get("year")) or "Unknown"
        counts[year] += 1

    return [{"name": name, "value": value} for name, value in sorted(counts.items())]


def top_tags(papers: List[Dict[str, Any]], limit: int = TOP_TAGS_LIMIT) -> List[Dict[str, Any]]:
    """
    Most frequent tags, one leading '#' stripped.
    Ties keep first-seen order.
    """
    counts: Counter = Counter()
    for paper in papers:
        tags = paper.get("tags")
        if not isinstance(tags, list):
            continue
        for tag in tags:
            clean_tag = to_text(tag)
            if clean_tag.startswith("#"):
                clean_tag = clean_tag[1:]
            counts[clean_tag] += 1

    # Counter.most_common is stable for equal counts (insertion order)
    return [{"name": name, "value": value} for name, value in counts.most_common(limit)]


def sheet_analytics(sheet: Dict[str, Any]) -> Dict[str, Any]:
    papers = sheet.get("papers") or []
    return {
        "sheet_id": sheet.get("id"),
        "total_papers": len(papers),
        "important_papers": sum(1 for p in papers if p.get("isImportant") is True),
        "years": year_distribution(papers),
        "tags": top_tags(papers),
    }
