# File: tests/test_analytics_service.py
from services.analytics_service import sheet_analytics, top_tags, year_distribution


def test_year_distribution_sorted_by_name():
    papers = [{"year": "2021"}, {"year": "2019"}, {"year": "2021"}, {}, {"year": "N/D"}]
    assert year_distribution(papers) == [
        {"name": "2019", "value": 1},
        {"name": "2021", "value": 2},
        {"name": "N/D", "value": 1},
        {"name": "Unknown", "value": 1},
    ]


def test_top_tags_strips_hash_and_merges():
    papers = [
        {"tags": ["#nlp", "vision"]},
        {"tags": ["nlp", "#rl"]},
        {"tags": "not-a-list"},
    ]
    assert top_tags(papers) == [
        {"name": "nlp", "value": 2},
        {"name": "vision", "value": 1},
        {"name": "rl", "value": 1},
    ]


def test_top_tags_limit():
    papers = [{"tags": [f"t{i}" for i in range(15)]}]
    assert len(top_tags(papers)) == 10
    assert len(top_tags(papers, limit=3)) == 3


def test_sheet_analytics_summary():
    sheet = {"id": "s1", "papers": [
        {"year": "2020", "tags": ["a"], "isImportant": True},
        {"year": "2020", "tags": [], "isImportant": False},
    ]}
    result = sheet_analytics(sheet)
    assert result["sheet_id"] == "s1"
    assert result["total_papers"] == 2
    assert result["important_papers"] == 1
    assert result["years"] == [{"name": "2020", "value": 2}]
    assert result["tags"] == [{"name": "a", "value": 1}]
