import json

from mcq_generator.models import MCQRecord
from mcq_generator.parsing import (
    clean_model_output,
    extract_json_array,
    normalize_record,
    normalize_records,
)
from tests.conftest import fenced, make_mcqs


def test_clean_strips_fence_with_language_tag():
    assert clean_model_output('```json\n[1, 2]\n```') == "[1, 2]"


def test_clean_strips_fence_without_language_tag():
    assert clean_model_output('```\n[1, 2]\n```') == "[1, 2]"


def test_clean_passes_through_unfenced_text():
    assert clean_model_output("  [1, 2]  ") == "[1, 2]"


def test_clean_empty_input():
    assert clean_model_output(None) == ""
    assert clean_model_output("") == ""


def test_extract_fenced_array_keeps_content_and_order():
    items = make_mcqs(10)
    assert extract_json_array(fenced(items)) == items


def test_extract_array_surrounded_by_prose():
    text = 'Here are your questions:\n[{"question": "Q?"}]\nGood luck!'
    assert extract_json_array(text) == [{"question": "Q?"}]


def test_extract_array_spanning_lines():
    text = "[\n  1,\n  2,\n  3\n]"
    assert extract_json_array(text) == [1, 2, 3]


def test_extract_returns_none_for_empty_input():
    assert extract_json_array(None) is None
    assert extract_json_array("") is None


def test_extract_returns_none_without_brackets():
    assert extract_json_array("I cannot help with that request.") is None


def test_extract_returns_none_for_malformed_json():
    assert extract_json_array("```json\n[{'question': 'single quotes'},]\n```") is None


def test_extract_greedy_span_rejects_two_arrays_with_prose():
    # first '[' to last ']' swallows the prose between the arrays
    assert extract_json_array("[1, 2] and also [3]") is None


def test_extract_greedy_span_joins_adjacent_lists():
    assert extract_json_array("[[1], [2]]") == [[1], [2]]


def test_normalize_fills_missing_fields():
    record = normalize_record({"question": "What is DNA?"})
    assert record == MCQRecord(question="What is DNA?", options=[], answer="", explanation="")


def test_normalize_empty_object():
    assert normalize_record({}).model_dump() == {
        "question": "",
        "options": [],
        "answer": "",
        "explanation": "",
    }


def test_normalize_malformed_options_become_empty():
    record = normalize_record({"question": "Q", "options": "A) x B) y", "answer": "A"})
    assert record.options == []
    assert record.answer == "A"


def test_normalize_null_fields_default_to_empty_string():
    record = normalize_record({"question": None, "answer": None, "explanation": None, "options": None})
    assert record == MCQRecord()


def test_normalize_does_not_enforce_option_count_or_answer_letter():
    record = normalize_record({"question": "Q", "options": ["A) x", "B) y"], "answer": "Z"})
    assert record.options == ["A) x", "B) y"]
    assert record.answer == "Z"


def test_normalize_non_object_items():
    assert normalize_records(["just a string", 7, None]) == [MCQRecord(), MCQRecord(), MCQRecord()]


def test_normalize_renders_scalar_values_as_text():
    record = normalize_record({"question": 42, "options": [1, "B) two"], "answer": "C"})
    assert record.question == "42"
    assert record.options == ["1", "B) two"]


def test_normalize_ignores_extra_fields():
    record = normalize_record({"question": "Q", "difficulty": "Hard"})
    assert set(record.model_dump()) == {"question", "options", "answer", "explanation"}


def test_normalize_is_idempotent():
    raw = json.loads(json.dumps(make_mcqs(3) + [{"question": "partial"}]))
    once = [record.model_dump() for record in normalize_records(raw)]
    twice = [record.model_dump() for record in normalize_records(once)]
    assert once == twice


def test_normalize_keeps_existing_records():
    records = [
        MCQRecord(question="Q", options=["A) a", "B) b"], answer="A", explanation="e"),
        MCQRecord(),
    ]
    assert normalize_records(records) == records


def test_normalize_preserves_order():
    items = make_mcqs(5)
    assert [r.question for r in normalize_records(items)] == [i["question"] for i in items]
