from src.csv_parser import parse_line, parse_table


def test_plain_fields_are_trimmed():
    assert parse_line(" P1 , Great phone ,5") == ["P1", "Great phone", "5"]


def test_quoted_field_keeps_commas():
    assert parse_line('P1,"Fast, light, cheap",4') == ["P1", "Fast, light, cheap", "4"]


def test_quotes_do_not_enter_field_text():
    assert parse_line('"P1","ok"') == ["P1", "ok"]


def test_trailing_delimiter_gives_empty_field():
    assert parse_line("a,b,") == ["a", "b", ""]


def test_unterminated_quote_swallows_rest_of_line():
    # best effort: the open quote keeps later commas inside the field
    assert parse_line('P1,"broken, text,5') == ["P1", "broken, text,5"]


def test_parse_table_maps_by_position():
    lines = ["product_id,review_text,rating", "P1,Nice,5", 'P2,"Bad, really",1']
    rows = parse_table(lines, ["product_id", "review_text", "rating"])
    assert rows == [
        {"product_id": "P1", "review_text": "Nice", "rating": "5"},
        {"product_id": "P2", "review_text": "Bad, really", "rating": "1"},
    ]


def test_parse_table_pads_short_rows_and_drops_extras():
    lines = ["h", "P1", "P2,Too,Many,Values"]
    rows = parse_table(lines, ["product_id", "review_text"])
    assert rows[0] == {"product_id": "P1", "review_text": ""}
    assert rows[1] == {"product_id": "P2", "review_text": "Too"}


def test_quotes_inside_a_field_are_dropped():
    assert parse_line('P1,say "hi" there,5') == ["P1", "say hi there", "5"]
