import pytest

from quizgen.config import ParsePolicy
from quizgen.errors import ParseError
from quizgen.services.contracts import MCQItem
from quizgen.services.normalizer import (
    normalize_analysis,
    normalize_descriptive,
    normalize_mcq,
    strip_fences,
)

MCQ_JSON = (
    '[{"question":"Q1","opt1":"a","opt2":"b","opt3":"c","opt4":"d","correctAnswer":1},'
    '{"question":"Q2","opt1":"e","opt2":"f","opt3":"g","opt4":"h","correctAnswer":3}]'
)

# --- strip_fences ---

def test_strip_fences_removes_tagged_and_bare_markers():
    assert strip_fences('```json\n{"a": 1}\n```') == '\n{"a": 1}\n'
    assert strip_fences("```[1]```") == "[1]"

def test_strip_fences_handles_none():
    assert strip_fences(None) == ""

# --- normalize_mcq ---

def test_mcq_fenced_multiline_equals_plain():
    fenced = "```json\n[\n  {\"question\":\"Q1\",\"opt1\":\"a\",\"opt2\":\"b\",\n\"opt3\":\"c\",\"opt4\":\"d\",\"correctAnswer\":1},\r\n" \
             "  {\"question\":\"Q2\",\"opt1\":\"e\",\"opt2\":\"f\",\"opt3\":\"g\",\"opt4\":\"h\",\"correctAnswer\":3}\n]\n```"
    assert normalize_mcq(fenced) == normalize_mcq(MCQ_JSON)
    assert [q["question"] for q in normalize_mcq(fenced)] == ["Q1", "Q2"]

def test_mcq_keeps_objects_as_is():
    raw = '```json[{"question":"Q1","correctAnswer":"B","hint":"x"}]```'
    assert normalize_mcq(raw) == [{"question": "Q1", "correctAnswer": "B", "hint": "x"}]

@pytest.mark.parametrize("raw", [
    "Sure! Here are your questions:",
    "",
    "```json\n[{\"question\": \"Q1\",]\n```",
    "42",
])
def test_mcq_malformed_returns_empty(raw):
    assert normalize_mcq(raw) == []

def test_mcq_raise_policy_surfaces_parse_error():
    with pytest.raises(ParseError):
        normalize_mcq("not json", policy=ParsePolicy.RAISE)

def test_mcq_single_object_is_wrapped():
    raw = '{"question":"Q1","opt1":"a","opt2":"b","opt3":"c","opt4":"d","correctAnswer":2}'
    assert len(normalize_mcq(raw)) == 1

def test_mcq_non_object_elements_are_dropped():
    assert normalize_mcq('[1, "two", {"question": "Q"}]') == [{"question": "Q"}]

def test_mcq_strict_items_drops_malformed():
    raw = (
        '[{"question":"Q1","opt1":"a","opt2":"b","opt3":"c","opt4":"d","correctAnswer":1},'
        '{"question":"Q2","opt1":"a","opt2":"b","correctAnswer":1},'
        '{"question":"Q3","opt1":"a","opt2":"b","opt3":"c","opt4":"d","correctAnswer":7}]'
    )
    items = normalize_mcq(raw, strict_items=True)
    assert [q["question"] for q in items] == ["Q1"]
    assert list(items[0]) == ["question", "opt1", "opt2", "opt3", "opt4", "correctAnswer"]

# --- normalize_descriptive ---

def test_descriptive_splits_on_newlines_and_periods():
    raw = "\n1. What is photosynthesis?\nExplain the water cycle. Describe evaporation\n\n"
    questions = [q.question for q in normalize_descriptive(raw)]
    assert questions == [
        "What is photosynthesis?",
        "Explain the water cycle",
        "Describe evaporation",
    ]

def test_descriptive_drops_short_fragments():
    raw = "A.\n-\nok\nWhy is the sky blue?\n  ab  \n"
    items = normalize_descriptive(raw)
    assert [q.question for q in items] == ["Why is the sky blue?"]
    assert all(len(q.question.strip()) > 2 for q in items)

def test_descriptive_abbreviation_fragments_question():
    items = normalize_descriptive("Who wrote the U.S. Constitution?")
    assert [q.question for q in items] == ["Who wrote the U", "Constitution?"]

def test_descriptive_handles_crlf():
    items = normalize_descriptive("First question here?\r\nSecond question here?")
    assert [q.question for q in items] == ["First question here?", "Second question here?"]

# --- normalize_analysis ---

def test_analysis_fenced_json_is_parsed():
    report = {"overallAccuracy": "50%", "strengths": [{"point": "Algebra", "details": "solid"}]}
    raw = '```json\n{"overallAccuracy": "50%", "strengths": [{"point": "Algebra", "details": "solid"}]}\n```\n'
    assert normalize_analysis(raw) == report

def test_analysis_invalid_json_raises():
    with pytest.raises(ParseError):
        normalize_analysis("```json\n{overallAccuracy: 50%}\n```")

def test_analysis_empty_policy_returns_none():
    assert normalize_analysis("nope", policy=ParsePolicy.EMPTY) is None

@pytest.mark.parametrize("raw", ['{"overallAccuracy": NaN}', '{"score": Infinity}', '[-Infinity]'])
def test_analysis_rejects_non_standard_constants(raw):
    with pytest.raises(ParseError):
        normalize_analysis(raw)

def test_mcq_non_standard_constant_drops_batch():
    raw = '[{"question":"Q1","opt1":"a","opt2":"b","opt3":"c","opt4":"d","correctAnswer":NaN}]'
    assert normalize_mcq(raw) == []
    with pytest.raises(ParseError):
        normalize_mcq(raw, policy=ParsePolicy.RAISE)

def test_strict_item_exposes_options_and_index():
    raw = '[{"question":"Q1","opt1":"a","opt2":"b","opt3":"c","opt4":"d","correctAnswer":3}]'
    item = MCQItem.model_validate(normalize_mcq(raw, strict_items=True)[0])
    assert item.options == ["a", "b", "c", "d"]
    assert item.correct_option_index == 3
