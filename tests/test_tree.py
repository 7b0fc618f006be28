from tubescope.tree import as_int, dig, items, text, walk

TREE = {
    "a": {"b": [{"c": 1}, {"c": 2}]},
    "runs": {"runs": [{"text": "Hello, "}, {"text": "world"}]},
    "simple": {"simpleText": "plain"},
    "content": {"content": "view-model text"},
}


class TestDig:
    def test_nested(self):
        assert dig(TREE, "a", "b", 1, "c") == 2

    def test_string_key_reads_first_list_element(self):
        assert dig(TREE, "a", "b", "c") == 1

    def test_absent_short_circuits(self):
        assert dig(TREE, "a", "missing", "c") is None
        assert dig(TREE, "a", "b", 5, "c") is None
        assert dig(None, "a") is None

    def test_empty_list(self):
        assert dig({"a": []}, "a", "b") is None

    def test_index_zero_reads_single_node(self):
        assert dig({"a": {"b": {"c": 3}}}, "a", "b", 0, "c") == 3
        assert dig({"a": {"b": {"c": 3}}}, "a", "b", 1, "c") is None


class TestItems:
    def test_list(self):
        assert items(TREE, "a", "b") == [{"c": 1}, {"c": 2}]

    def test_single_node_wrapped(self):
        assert items(TREE, "simple") == [{"simpleText": "plain"}]

    def test_absent(self):
        assert items(TREE, "nope") == []


class TestWalk:
    def test_fans_out(self):
        assert list(walk(TREE, "a", "b", "c")) == [1, 2]

    def test_absent(self):
        assert list(walk(TREE, "x", "y")) == []


class TestText:
    def test_runs_joined(self):
        assert text(TREE, "runs") == "Hello, world"

    def test_simple_text(self):
        assert text(TREE, "simple") == "plain"

    def test_content(self):
        assert text(TREE, "content") == "view-model text"

    def test_absent(self):
        assert text(TREE, "nothing") is None
        assert text({"empty": ""}, "empty") is None


class TestAsInt:
    def test_values(self):
        assert as_int(5) == 5
        assert as_int("61943233845") == 61943233845
        assert as_int("abc") is None
        assert as_int(True) is None
        assert as_int(None) is None
