import pytest
from jetquote.services.aliases import lookup_alias
from jetquote.utils.text import normalize_text


@pytest.mark.unit
class TestNormalizeText:

    @pytest.mark.parametrize("value,expected", [
        ("Milano", "milano"),
        ("  São   Paulo ", "sao paulo"),
        ("Zürich", "zurich"),
        ("Genève", "geneve"),
        ("NICE CÔTE D'AZUR", "nice cote d'azur"),
    ])
    def test_normalize(self, value, expected):
        assert normalize_text(value) == expected


@pytest.mark.unit
class TestAliases:

    @pytest.mark.parametrize("name,code", [
        ("nizza", "LFMN"),
        ("monte carlo", "LFMN"),
        ("londra", "EGLF"),
        ("st moritz", "LSZS"),
    ])
    def test_known(self, name, code):
        assert lookup_alias(name) == code

    def test_unknown(self):
        assert lookup_alias("atlantis") is None
