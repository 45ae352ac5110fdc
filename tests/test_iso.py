from __future__ import annotations

from route360.iso import UNKNOWN_FLAG, canonical_name, flag_for, format_label, iso2_for, normalize, resolve_alias


def test_normalize_trims_and_lowercases() -> None:
    assert normalize("  Czech Republic \n") == "czech republic"
    assert normalize(None) == ""
    assert normalize("") == ""


def test_resolve_alias_maps_known_aliases_only() -> None:
    assert resolve_alias("usa") == "united states of america"
    assert resolve_alias("dubai") == "united arab emirates"
    assert resolve_alias("japan") == "japan"
    assert resolve_alias("USA") == "USA"


def test_canonical_name_normalizes_before_alias_lookup() -> None:
    assert canonical_name("  UK ") == "united kingdom"
    assert canonical_name("United States") == "united states of america"


def test_iso2_uses_reference_overrides_and_pycountry() -> None:
    assert iso2_for("Japan") == "JP"
    assert iso2_for("UAE") == "AE"
    assert iso2_for("Czechia") == "CZ"
    assert iso2_for("Uruguay") == "UY"
    assert iso2_for("Atlantis") is None
    assert iso2_for("") is None


def test_flag_for_builds_regional_indicator_pair() -> None:
    assert flag_for("Japan") == "\U0001F1EF\U0001F1F5"
    assert flag_for("usa") == "\U0001F1FA\U0001F1F8"
    assert flag_for("Atlantis") == UNKNOWN_FLAG


def test_format_label_prefixes_flag() -> None:
    assert format_label("France") == "\U0001F1EB\U0001F1F7 France"
