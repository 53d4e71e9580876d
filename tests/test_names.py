import pytest

from iptvguide.utils.names import normalize_name


class TestNormalizeName:

    def test_punctuation_case_and_spacing_collapse(self):
        assert normalize_name("ESPN HD!!") == normalize_name("espn-hd") == "espn hd"

    @pytest.mark.parametrize("raw, expected", [
        ("  BBC   One  ", "bbc one"),
        ("Sky Sports F1 (UK)", "sky sports f1 uk"),
        ("--", ""),
        ("Télé 5", "t l 5"),
        ("CNN_International", "cnn international"),
    ])
    def test_examples(self, raw, expected):
        assert normalize_name(raw) == expected

    @pytest.mark.parametrize("empty", ["", None])
    def test_empty_input(self, empty):
        assert normalize_name(empty) == ""
