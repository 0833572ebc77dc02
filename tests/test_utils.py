import pytest

import params
import utils


@pytest.mark.parametrize("name,code", [
    ("民主進步黨", "DPP"),
    ("中國國民黨", "KMT"),
    (" 中國國民黨 ", "KMT"),
    ("無", "IND"),
    ("", "IND"),
    (None, "IND"),
    ("台灣民眾黨", "IND"),
])
def test_party_code(name, code):
    assert utils.party_code(name) == code


def test_party_color_falls_back_to_independent():
    assert utils.party_color("DPP") == params.PARTY_COLORS["DPP"]
    assert utils.party_color("XYZ") == params.PARTY_COLORS["IND"]


def test_votes_str():
    assert utils.votes_str(1234567) == "1,234,567"
    assert utils.votes_str(12.7) == "12"
    assert utils.votes_str(None) == "-"


@pytest.mark.parametrize("level", range(6))
def test_level_color(level):
    assert utils.level_color(level) == params.LEVEL_COLORS[level]


def test_level_color_missing():
    assert utils.level_color(None) == params.MISSING_LEVEL_COLOR
    assert utils.level_color(9) == params.MISSING_LEVEL_COLOR


class TestFindPhotoUrl:

    MAPPING = [
        {"name": "王小明", "photoUrl": "https://example.org/1.jpg"},
        {"name": "高金素梅", "photoUrl": "https://example.org/2.jpg"},
        {"name": "伍麗華Saidhai‧Tahovecahe", "photoUrl": "https://example.org/3.jpg"},
        {"name": "鄭天財Sra‧Kacaw", "photoUrl": "https://example.org/4.jpg"},
    ]

    def test_exact(self):
        assert utils.find_photo_url("王小明", self.MAPPING) == "https://example.org/1.jpg"

    def test_whitespace_removed(self):
        assert utils.find_photo_url("高金 素梅", self.MAPPING) == "https://example.org/2.jpg"

    def test_dot_variants(self):
        assert utils.find_photo_url("伍麗華Saidhai.Tahovecahe", self.MAPPING) == "https://example.org/3.jpg"
        assert utils.find_photo_url("伍麗華Saidhai·Tahovecahe", self.MAPPING) == "https://example.org/3.jpg"

    def test_first_token_prefix(self):
        assert utils.find_photo_url("鄭天財 Sra Kacaw", self.MAPPING) == "https://example.org/4.jpg"

    def test_not_found(self):
        assert utils.find_photo_url("李四", self.MAPPING) is None
