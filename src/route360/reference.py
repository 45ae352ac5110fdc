from __future__ import annotations

from route360.models import CountryReference


def _ref(name: str, lat: float, lng: float, iso2: str) -> tuple[str, CountryReference]:
    return name, CountryReference(canonical_name=name, lat=lat, lng=lng, iso2=iso2)


# Approximate centroids, keyed by canonical (trimmed, lowercased) name.
REFERENCE: dict[str, CountryReference] = dict(
    [
        _ref("japan", 36.2, 138.3, "JP"),
        _ref("italy", 41.9, 12.6, "IT"),
        _ref("france", 46.2, 2.2, "FR"),
        _ref("spain", 40.4, -3.7, "ES"),
        _ref("germany", 51.2, 10.4, "DE"),
        _ref("egypt", 26.8, 30.8, "EG"),
        _ref("china", 35.9, 104.2, "CN"),
        _ref("canada", 56.1, -106.3, "CA"),
        _ref("brazil", -10.3, -53.2, "BR"),
        _ref("mexico", 23.6, -102.5, "MX"),
        _ref("greece", 39.1, 21.8, "GR"),
        _ref("turkey", 39.0, 35.2, "TR"),
        _ref("united states of america", 39.8, -98.6, "US"),
        _ref("united kingdom", 55.3, -3.4, "GB"),
        _ref("united arab emirates", 23.4, 53.8, "AE"),
        _ref("saudi arabia", 23.9, 45.1, "SA"),
        _ref("qatar", 25.3, 51.2, "QA"),
        _ref("india", 20.6, 78.9, "IN"),
        _ref("morocco", 31.8, -7.1, "MA"),
        _ref("australia", -25.3, 133.8, "AU"),
        _ref("monaco", 43.7384, 7.4246, "MC"),
        _ref("portugal", 39.4, -8.2, "PT"),
        _ref("netherlands", 52.1, 5.3, "NL"),
        _ref("belgium", 50.8, 4.5, "BE"),
        _ref("switzerland", 46.8, 8.2, "CH"),
        _ref("austria", 47.5, 14.5, "AT"),
        _ref("sweden", 60.1, 18.6, "SE"),
        _ref("norway", 60.5, 8.5, "NO"),
        _ref("denmark", 56.2, 9.5, "DK"),
        _ref("finland", 64.0, 26.0, "FI"),
        _ref("ireland", 53.4, -8.2, "IE"),
        _ref("south africa", -30.6, 22.9, "ZA"),
        _ref("kenya", 0.02, 37.9, "KE"),
        _ref("tanzania", -6.4, 35.0, "TZ"),
        _ref("thailand", 15.8, 100.9, "TH"),
        _ref("indonesia", -2.5, 118.0, "ID"),
        _ref("malaysia", 4.2, 102.0, "MY"),
        _ref("singapore", 1.35, 103.8, "SG"),
        _ref("south korea", 36.5, 127.9, "KR"),
        _ref("vietnam", 14.1, 108.3, "VN"),
        _ref("philippines", 12.9, 121.8, "PH"),
        _ref("argentina", -38.4, -63.6, "AR"),
        _ref("chile", -35.7, -71.5, "CL"),
        _ref("peru", -9.2, -75.0, "PE"),
        _ref("colombia", 4.6, -74.1, "CO"),
        _ref("russia", 61.5, 105.3, "RU"),
        _ref("ukraine", 48.3, 31.2, "UA"),
        _ref("poland", 52.1, 19.1, "PL"),
        _ref("czech republic", 49.8, 15.5, "CZ"),
        _ref("hungary", 47.1, 19.5, "HU"),
        _ref("croatia", 45.1, 15.2, "HR"),
        _ref("serbia", 44.0, 20.9, "RS"),
        _ref("romania", 45.9, 24.9, "RO"),
        _ref("bulgaria", 42.7, 25.5, "BG"),
        _ref("new zealand", -40.9, 174.9, "NZ"),
        _ref("iceland", 64.9, -19.0, "IS"),
        _ref("jordan", 31.2, 36.0, "JO"),
        _ref("lebanon", 33.9, 35.9, "LB"),
        _ref("oman", 21.5, 55.9, "OM"),
        _ref("bahrain", 26.1, 50.5, "BH"),
        _ref("kuwait", 29.3, 47.5, "KW"),
        _ref("tunisia", 34.0, 9.5, "TN"),
        _ref("algeria", 28.0, 1.7, "DZ"),
        _ref("nigeria", 9.1, 8.7, "NG"),
        _ref("ghana", 7.9, -1.0, "GH"),
        _ref("ethiopia", 9.1, 40.5, "ET"),
    ]
)

ALIASES: dict[str, str] = {
    "usa": "united states of america",
    "united states": "united states of america",
    "uk": "united kingdom",
    "uae": "united arab emirates",
    "dubai": "united arab emirates",
}

_ALIAS_DISPLAY: tuple[str, ...] = ("United States", "USA", "UK", "UAE", "Dubai")

# Display casing for names whose str.title() would be wrong.
_DISPLAY_OVERRIDES: dict[str, str] = {
    "united states of america": "United States of America",
}


def display_name(canonical: str) -> str:
    return _DISPLAY_OVERRIDES.get(canonical, canonical.title())


CATALOG: tuple[str, ...] = tuple(display_name(k) for k in REFERENCE) + _ALIAS_DISPLAY


def reference_for(canonical: str) -> CountryReference | None:
    return REFERENCE.get(canonical)
