# File: tests/test_structure_miner.py
import json
import unittest

from services.ingestion.structure_miner import NodeKind, classify, mine_candidates
from services.ingestion.tolerant_parser import loads


class TestClassify(unittest.TestCase):

    def test_plain_object_has_no_kinds(self):
        self.assertEqual(classify({"foo": 1}), frozenset())

    def test_kinds_are_not_exclusive(self):
        node = {"data": [], "output": "[]", "Título": "A"}
        self.assertEqual(
            classify(node),
            frozenset({NodeKind.ENVELOPE, NodeKind.EMBEDDED_OUTPUT, NodeKind.CANDIDATE})
        )

    def test_wrong_types_do_not_classify(self):
        self.assertEqual(classify({"data": {"Título": "A"}, "output": ["x"]}), frozenset())

    def test_empty_title_is_not_a_candidate(self):
        self.assertEqual(classify({"Título": ""}), frozenset())

    def test_summary_alone_makes_a_candidate(self):
        self.assertEqual(classify({"Resumen Ejecutivo": "S"}), frozenset({NodeKind.CANDIDATE}))


class TestMineCandidates(unittest.TestCase):

    def test_envelope_unwrap(self):
        tree = loads('{"data":[{"Título":"A"}]}')
        self.assertEqual(mine_candidates(tree), [{"Título": "A"}])

    def test_embedded_output_unwrap(self):
        tree = loads(r'[{"output":"[{\"Título\":\"B\"}]"}]')
        self.assertEqual(mine_candidates(tree), [{"Título": "B"}])

    def test_envelope_that_is_also_a_record_yields_both(self):
        node = {"Título": "Outer", "data": [{"Título": "Inner"}]}
        result = mine_candidates(node)
        self.assertEqual(len(result), 2)
        # Envelope contents come before the object itself
        self.assertEqual(result[0], {"Título": "Inner"})
        self.assertIs(result[1], node)

    def test_all_three_rules_on_one_object(self):
        node = {
            "data": [{"Título": "From data"}],
            "output": json.dumps([{"Título": "From output"}]),
            "Título": "Self",
        }
        titles = [c["Título"] for c in mine_candidates(node)]
        self.assertEqual(titles, ["From data", "From output", "Self"])

    def test_input_order_preserved_depth_first(self):
        tree = [
            {"Título": "1"},
            {"data": [{"Título": "2"}, [{"Título": "3"}]]},
            [[{"Título": "4"}]],
            {"Título": "5"},
        ]
        self.assertEqual([c["Título"] for c in mine_candidates(tree)], ["1", "2", "3", "4", "5"])

    def test_undecodable_output_is_skipped_and_walk_continues(self):
        tree = [{"output": "Job finished OK"}, {"Título": "C"}]
        self.assertEqual(mine_candidates(tree), [{"Título": "C"}])

    def test_output_not_decoding_to_a_list_is_skipped(self):
        tree = [{"output": '{"Título": "not in a list"}'}, {"output": "42"}]
        self.assertEqual(mine_candidates(tree), [])

    def test_output_uses_tolerant_grammar(self):
        tree = [{"output": "[{Título: 'D', Año: 2021,},]"}]
        self.assertEqual(mine_candidates(tree), [{"Título": "D", "Año": 2021}])

    def test_output_elements_are_appended_not_walked(self):
        tree = {"output": json.dumps([{"data": [{"Título": "X"}]}])}
        self.assertEqual(mine_candidates(tree), [{"data": [{"Título": "X"}]}])

    def test_output_drops_non_object_elements(self):
        tree = {"output": json.dumps([{"Título": "Y"}, "stray", 3, None])}
        self.assertEqual(mine_candidates(tree), [{"Título": "Y"}])

    def test_duplicates_are_kept(self):
        record = {"Título": "Same"}
        self.assertEqual(mine_candidates([record, record]), [record, record])

    def test_scalars_and_plain_objects_yield_nothing(self):
        self.assertEqual(mine_candidates("text"), [])
        self.assertEqual(mine_candidates(None), [])
        self.assertEqual(mine_candidates({"meta": {"count": 3}}), [])

    def test_nested_records_inside_a_candidate_are_not_mined(self):
        # Only "data" envelopes are descended into
        tree = {"Título": "Parent", "children": [{"Título": "Child"}]}
        self.assertEqual([c["Título"] for c in mine_candidates(tree)], ["Parent"])

    def test_output_with_oversized_number_is_skipped(self):
        bad_output = '[{"Título": "A", "Año": ' + "9" * 5000 + '}]'
        tree = [{"output": bad_output}, {"Título": "C"}]
        self.assertEqual(mine_candidates(tree), [{"Título": "C"}])


if __name__ == "__main__":
    unittest.main()
