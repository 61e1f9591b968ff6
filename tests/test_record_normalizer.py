# File: tests/test_record_normalizer.py
import pytest

from services.identity_service import IdentityManager
from services.ingestion.record_normalizer import (
    dedupe_links,
    extract_links,
    normalize_explicit_link,
    normalize_record,
    normalize_records,
)


@pytest.fixture
def identity():
    return IdentityManager(prefix="test")


def test_empty_record_gets_every_default(identity):
    paper = normalize_record({}, identity)
    assert paper.title == "Untitled Paper"
    assert paper.year == "N/D"
    assert paper.tags == []
    assert paper.summary == "No summary provided."
    assert paper.contribution == ""
    assert paper.user_notes == ""
    assert paper.is_important is False
    assert paper.links == []
    assert paper.id.startswith("test_")


def test_non_mapping_candidate_is_treated_as_empty(identity):
    paper = normalize_record("not a record", identity)
    assert paper.title == "Untitled Paper"


def test_full_record_mapping(identity):
    raw = {
        "Título": "Attention Is All You Need",
        "Año": 2017,
        "Etiquetas": ["#transformers", "nlp"],
        "Resumen Ejecutivo": "Introduces the Transformer.",
        "Conclusión/Aporte Clave": "Self-attention replaces recurrence.",
    }
    paper = normalize_record(raw, identity)
    assert paper.title == "Attention Is All You Need"
    assert paper.year == "2017"
    assert paper.tags == ["#transformers", "nlp"]
    assert paper.summary == "Introduces the Transformer."
    assert paper.contribution == "Self-attention replaces recurrence."


def test_explicit_url_goes_first_and_gets_scheme(identity):
    raw = {"url": "example.com/x", "Resumen Ejecutivo": "see https://foo.bar"}
    assert normalize_record(raw, identity).links == ["https://example.com/x", "https://foo.bar"]


def test_links_found_in_summary_and_contribution(identity):
    raw = {
        "Resumen Ejecutivo": "Preprint arXiv:1706.03762 and code at github.com/org/repo",
        "Conclusión/Aporte Clave": "Project page http://site.io/p",
    }
    assert normalize_record(raw, identity).links == [
        "arXiv:1706.03762",
        "github.com/org/repo",
        "http://site.io/p",
    ]


def test_explicit_link_duplicate_of_text_link_is_dropped(identity):
    raw = {"link": "https://a.org/paper", "Resumen Ejecutivo": "https://a.org/paper again https://a.org/paper"}
    assert normalize_record(raw, identity).links == ["https://a.org/paper"]


def test_first_non_empty_explicit_field_wins(identity):
    raw = {"url": "   ", "link": 42, "URL": "www.first.net", "doi": "10.1000/xyz"}
    assert normalize_record(raw, identity).links == ["https://www.first.net"]


def test_raw_doi_is_left_alone(identity):
    assert normalize_record({"doi": " 10.1000/xyz "}, identity).links == ["10.1000/xyz"]


def test_year_coercion(identity):
    assert normalize_record({"Año": 2021.0}, identity).year == "2021"
    assert normalize_record({"Año": "2020"}, identity).year == "2020"
    assert normalize_record({"Año": ""}, identity).year == "N/D"


def test_tags_must_be_a_list(identity):
    assert normalize_record({"Etiquetas": "a, b"}, identity).tags == []
    assert normalize_record({"Etiquetas": ["a", 1, None, ["x"]]}, identity).tags == ["a", "1"]


def test_non_text_title_is_rendered_as_text(identity):
    assert normalize_record({"Título": 1984}, identity).title == "1984"


def test_ids_are_distinct(identity):
    papers = normalize_records([{"Título": "A"}, {"Título": "A"}], identity)
    assert papers[0].id != papers[1].id


def test_wire_form_uses_camel_case(identity):
    dumped = normalize_record({"Título": "A"}, identity).model_dump(by_alias=True)
    assert set(dumped) == {
        "id", "title", "year", "tags", "summary", "contribution", "userNotes", "isImportant", "links"
    }


@pytest.mark.parametrize("raw,expected", [
    ("example.com/x", "https://example.com/x"),
    ("www.site.net", "https://www.site.net"),
    ("  openreview.org/forum  ", "https://openreview.org/forum"),
    ("https://already.com", "https://already.com"),
    ("ftp://files.org/a", "ftp://files.org/a"),
    ("arXiv:2101.00001", "arXiv:2101.00001"),
    ("10.1145/3292500", "10.1145/3292500"),
])
def test_normalize_explicit_link(raw, expected):
    assert normalize_explicit_link(raw) == expected


def test_extract_links_empty_text():
    assert extract_links("") == []
    assert extract_links("no links here") == []


def test_dedupe_is_idempotent():
    links = ["b", "a", "b", "c", "a"]
    once = dedupe_links(links)
    assert once == ["b", "a", "c"]
    assert dedupe_links(once) == once
