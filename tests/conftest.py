import pytest


@pytest.fixture(autouse=True)
def _no_portal_env(monkeypatch):
    for name in ("UONET_USERNAME", "UONET_PASSWORD", "UONET_HOST", "UONET_SYMBOL",
                 "UONET_TIMEOUT", "UONET_SESSION_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def diary_payload():
    return {
        "Id": 1,
        "IdUczen": 111,
        "UczenImie": "Jan",
        "UczenImie2": None,
        "UczenNazwisko": "Kowalski",
        "UczenPelnaNazwa": "Jan Kowalski",
        "IsDziennik": True,
        "IdDziennik": 101,
        "IdPrzedszkoleDziennik": 0,
        "Poziom": 2,
        "Symbol": "A",
        "Nazwa": "2A",
        "DziennikRokSzkolny": 2020,
        "Okresy": [
            {
                "NumerOkresu": 1,
                "Poziom": 2,
                "DataOd": "2020-09-01 00:00:00",
                "DataDo": "2021-1-31 00:00:00",
                "IdOddzial": 16,
                "IdJednostkaSprawozdawcza": 1,
                "IsLastOkres": False,
                "Id": 11,
            },
        ],
    }


@pytest.fixture
def notes_payload():
    return {
        "Uwagi": [
            {
                "TrescUwagi": "Pomoc przy organizacji apelu",
                "Kategoria": "Zaangażowanie społeczne",
                "KategoriaTyp": 1,
                "PunktyWidoczne": True,
                "PokazPunkty": True,
                "Punkty": "5",
                "DataWpisu": "2021-01-11 17:30:15",
                "Nauczyciel": "Karolina Kowalska [AN]",
                "Id": 1,
            },
            {
                "TrescUwagi": "Rozmowa na lekcji",
                "Kategoria": "Zachowanie na lekcji",
                "KategoriaTyp": 3,
                "PokazPunkty": False,
                "Punkty": "",
                "DataWpisu": "2013-08-01 00:20:40",
                "Nauczyciel": "Jan Nowak [JN]",
                "Id": 2,
            },
        ],
        "Osiagniecia": ["I miejsce w konkursie matematycznym"],
    }
