import pytest
from csvscout.errors import UnrecognizedFormatError
from csvscout.logic.line_stats import build_line_statistics
from csvscout.logic.sniffer_logic import (
    delimiter_rank, guess_delimiter, guess_quote, rank_delimiters, trial_parse
)

def _stats(text, separator=None):
    return [build_line_statistics(line, separator) for line in text.splitlines()]

# ==============================================================================
# QUOTE DETECTOR
# ==============================================================================

def test_single_quote_when_double_quote_absent():
    assert guess_quote(_stats("name;age\n'John, Doe';30")) == "'"

def test_double_quote_has_priority():
    assert guess_quote(_stats("\"a\";'b'\n\"c\";'d'")) == '"'

def test_unbalanced_double_quote_falls_through():
    assert guess_quote(_stats("\"a;b\n'x';'y'")) == "'"

def test_odd_count_is_never_selected():
    assert guess_quote(_stats("'a';'b'\nit's;here")) != "'"

def test_default_when_nothing_qualifies():
    assert guess_quote(_stats("a;b\n1;2")) == '"'
    assert guess_quote(_stats("\"a;b\n'x;y")) == '"'
    assert guess_quote([]) == '"'

# ==============================================================================
# DELIMITER RANKER
# ==============================================================================

def test_known_delimiter_ranks():
    assert delimiter_rank(',') == 0
    assert delimiter_rank('\t') == 1
    assert delimiter_rank(' ') == 8

def test_unknown_delimiters_rank_after_known_by_code_point():
    assert delimiter_rank('#') == 9 + ord('#')
    assert delimiter_rank('#') > delimiter_rank(' ')
    assert delimiter_rank('!') < delimiter_rank('#')

def test_rank_delimiters_order():
    ranked = rank_delimiters({' ', '|', ',', '#', '\t', ';', ':', '~', '+', '!'})
    assert ranked == [',', '\t', ';', ':', '|', '~', '+', ' ', '!', '#']

# ==============================================================================
# TRIAL PARSE
# ==============================================================================

def test_trial_parse_with_header():
    assert trial_parse("a,b\n1,2", ',', '"', True) == (['a', 'b'], [['1', '2']])

def test_trial_parse_without_header():
    assert trial_parse("a,b\n1,2", ',', '"', False) == (None, [['a', 'b'], ['1', '2']])

def test_trial_parse_skips_blank_lines():
    assert trial_parse("a,b\n\n1,2\n", ',', '"', True) == (['a', 'b'], [['1', '2']])

def test_trial_parse_respects_quotes():
    header, records = trial_parse('x,y\n"1,5",2', ',', '"', True)
    assert header == ['x', 'y']
    assert records == [['1,5', '2']]

# ==============================================================================
# DELIMITER VALIDATOR
# ==============================================================================

def test_header_path_returns_header_and_first_record():
    text = "a,b,c\n1,2,3\n4,5,6"
    assert guess_delimiter(_stats(text), text, '"', True) == (',', ['a', 'b', 'c'], ['1', '2', '3'])

def test_header_path_handles_quoted_delimiters():
    """Raw counts disagree because of the quoted ';', the real parse does not."""
    text = 'id;name\n1;"Doe; John"\n2;Smith'
    delim, header, first_record = guess_delimiter(_stats(text), text, '"', True)
    assert delim == ';'
    assert header == ['id', 'name']
    assert first_record == ['1', 'Doe; John']

def test_same_sample_without_header_is_unrecognized():
    text = 'id;name\n1;"Doe; John"\n2;Smith'
    with pytest.raises(UnrecognizedFormatError):
        guess_delimiter(_stats(text), text, '"', False)

def test_fallback_path_without_header():
    text = "a|b|c\n1|2|3"
    assert guess_delimiter(_stats(text), text, '"', False) == ('|', None, None)

def test_header_only_sample_uses_fallback():
    """No data records means the header path cannot accept."""
    text = "a,b,c"
    assert guess_delimiter(_stats(text), text, '"', True) == (',', None, None)

def test_fallback_prefers_highest_ranked_consistent():
    text = "a;b,c\n1;2,3"
    assert guess_delimiter(_stats(text), text, '"', False)[0] == ','

def test_fallback_tie_break_ignores_inconsistent_higher_ranked_delimiter():
    """',' ranks first but is inconsistent, so the best consistent one is ';'."""
    text = "a,b;c|d\n1,,2;3|4"
    assert guess_delimiter(_stats(text), text, '"', False)[0] == ';'

def test_candidate_equal_to_quote_is_skipped():
    text = "a|b\n1|2"
    with pytest.raises(UnrecognizedFormatError) as exc:
        guess_delimiter(_stats(text), text, '|', False)
    assert exc.value.candidates == ['|']

def test_no_candidates_on_first_line():
    text = "abc\n1,2"
    with pytest.raises(UnrecognizedFormatError) as exc:
        guess_delimiter(_stats(text), text, '"', False)
    assert exc.value.candidates == []

def test_empty_statistics_are_unrecognized():
    with pytest.raises(UnrecognizedFormatError):
        guess_delimiter([], "", '"', True)

def test_inconsistent_everywhere_lists_tried_candidates():
    text = "a,b;c|d\n1,2\n3;4;5|6|7"
    with pytest.raises(UnrecognizedFormatError) as exc:
        guess_delimiter(_stats(text), text, '"', True)
    assert exc.value.candidates == [',', ';', '|']
