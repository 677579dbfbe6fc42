"""Shared fixtures: one restaurant with the Tartare example and a second tenant."""
import copy
import pytest

from sommelier.db.directory import InMemoryTenantDirectory
from sommelier.schemas.tenant import Tenant


def wine(name, grape="", vintage="", price="", note=""):
    return {"name": name, "grape": grape, "vintage": vintage, "price": price, "note": note}


def dish(name, price, glass, mid, exclusive):
    return {
        "dish": name,
        "price": price,
        "pairings": {"byGlass": glass, "midRange": mid, "exclusive": exclusive},
    }


PALATE_MENU = [
    {
        "category": "Starters",
        "items": [
            dish(
                "Tartare", "185",
                wine("Chablis", "Chardonnay", "2021", "145", "Crisp and mineral"),
                wine("Sancerre Rouge", "Pinot Noir", "2019", "690", "Light red fruit"),
                wine("Meursault 1er Cru", "Chardonnay", "2017", "1450", "Hazelnut and butter"),
            ),
            dish(
                "Oysters", "210",
                wine("Muscadet", "Melon de Bourgogne", "2022", "120"),
                wine("Chablis Premier Cru", "Chardonnay", "2020", "750"),
                wine("Krug Grande Cuvée", "Champagne blend", "NV", "3200"),
            ),
        ],
    },
    {
        "category": "Mains",
        "items": [
            dish(
                "Lamb Shoulder", "345",
                wine("Côtes du Rhône", "Grenache", "2020", "135"),
                wine("Rioja Reserva", "Tempranillo", "2016", "820"),
                wine("Barolo", "Nebbiolo", "2013", "2100", "Tar and roses"),
            ),
        ],
    },
]

HARBOUR_MENU = [
    {
        "category": "Fish",
        "items": [
            dish(
                "Cod Loin", "295",
                wine("Albariño", "Albariño", "2022", "130"),
                wine("Riesling Trocken", "Riesling", "2019", "640"),
                wine("Corton-Charlemagne", "Chardonnay", "2015", "2600"),
            ),
        ],
    },
]


@pytest.fixture
def palate_menu():
    return copy.deepcopy(PALATE_MENU)


@pytest.fixture
def tenants():
    return [
        Tenant(id="palate", name="Palate", access_code="4821", theme={"primary": "#1e293b"},
               menu=copy.deepcopy(PALATE_MENU)),
        Tenant(id="harbour", name="Harbour House", access_code="7310", menu=copy.deepcopy(HARBOUR_MENU)),
    ]


@pytest.fixture
def directory(tenants):
    return InMemoryTenantDirectory(tenants)
