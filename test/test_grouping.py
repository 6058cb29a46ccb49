from src.grouping import UNKNOWN_PRODUCT, group_by_product


ROWS = [
    {"product_id": "P2", "product_title": "Phone X", "review_text": "a"},
    {"product_id": "P1", "product_title": "", "review_text": "b"},
    {"product_id": "", "product_title": "Lamp", "review_text": "c"},
    {"product_id": "P2", "product_title": "Phone X Pro", "review_text": "d"},
    {"product_id": "", "product_title": "", "review_text": "e"},
    {"product_id": "P1", "product_title": "", "review_text": "f"},
]


def test_groups_follow_first_seen_order():
    groups = group_by_product(ROWS)
    assert list(groups) == ["P2", "P1", "Lamp", UNKNOWN_PRODUCT]


def test_every_row_lands_in_exactly_one_group():
    groups = group_by_product(ROWS)
    texts = [r["review_text"] for g in groups.values() for r in g.rows]
    assert sorted(texts) == sorted(r["review_text"] for r in ROWS)
    assert sum(len(g) for g in groups.values()) == len(ROWS)


def test_rows_keep_input_order_within_group():
    groups = group_by_product(ROWS)
    assert [r["review_text"] for r in groups["P1"].rows] == ["b", "f"]


def test_product_name_prefers_title_then_id():
    groups = group_by_product(ROWS)
    assert groups["P1"].product_name == "P1"
    assert groups["Lamp"].product_name == "Lamp"
    assert groups[UNKNOWN_PRODUCT].product_name == UNKNOWN_PRODUCT


def test_group_name_comes_from_first_row_but_rows_keep_their_own():
    group = group_by_product(ROWS)["P2"]
    assert group.product_name == "Phone X"
    assert [r["productName"] for r in group.rows] == ["Phone X", "Phone X Pro"]


def test_input_rows_are_not_modified():
    rows = [{"product_id": "P1", "review_text": "x"}]
    group_by_product(rows)
    assert rows == [{"product_id": "P1", "review_text": "x"}]


def test_empty_input():
    assert group_by_product([]) == {}
