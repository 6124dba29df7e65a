"""Shared test fixtures for datamap."""

from __future__ import annotations

import json

import pytest

from datamap import RawSystem
from datamap.config import reset_settings
from tests.helpers.builders import make_raw


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from DATAMAP_* env vars and cached settings."""
    for var in ("DATAMAP_DATA_FILE", "DATAMAP_LAYOUT_MODE", "DATAMAP_LOG_DIR", "DATAMAP_VERBOSITY"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def raw_systems() -> list[RawSystem]:
    """A small catalog covering every type, a duplicate id and a dangling dependency."""
    return [
        make_raw(
            "web_app",
            system_type="Application",
            declarations=[
                ("provide.service", ["user.provided.identifiable.contact.email"]),
                ("advertising.third_party", ["user.derived.identifiable.location"]),
            ],
            dependencies=["api", "ads"],
        ),
        make_raw(
            "api",
            system_type="Service",
            declarations=[
                ("provide.service", [
                    "user.provided.identifiable.contact.email",
                    "user.provided.identifiable.name",
                ]),
            ],
            dependencies=["db", "ghost"],
        ),
        make_raw(
            "db",
            system_type="Database",
            declarations=[
                ("provide.service", ["user.provided.identifiable.contact.email"]),
                ("improve.system", ["user.derived.identifiable.device.cookie_id"]),
            ],
        ),
        make_raw(
            "ads",
            system_type="Integration",
            declarations=[("advertising.third_party", ["user.derived.identifiable.location"])],
        ),
        make_raw("api", name="API (duplicate)", system_type="Integration"),
        make_raw("batch", system_type="Cron Job", declarations=[("improve.system", ["email"])]),
        make_raw("empty", system_type="Application"),
    ]


@pytest.fixture
def parsed_systems(raw_systems):
    from datamap.pipeline.normalize import normalize_all

    return normalize_all(raw_systems)


@pytest.fixture
def export_file(tmp_path):
    """A JSON export in the upstream snake_case format."""
    data = [
        {
            "fides_key": "crm",
            "name": "CRM",
            "description": "Customer records",
            "system_type": "Application",
            "system_dependencies": ["warehouse"],
            "privacy_declarations": [
                {
                    "name": "Contact",
                    "data_use": "marketing.communications",
                    "data_categories": ["user.provided.identifiable.contact.email"],
                    "data_subjects": ["customer"],
                }
            ],
        },
        {
            "fides_key": "warehouse",
            "name": "Warehouse",
            "description": "Analytics store",
            "system_type": "Database",
            "system_dependencies": [],
            "privacy_declarations": [
                {
                    "name": "Analytics",
                    "data_use": "improve.system",
                    "data_categories": [
                        "user.provided.identifiable.contact.email",
                        "user.derived.identifiable.location",
                    ],
                    "data_subjects": ["customer", "employee"],
                }
            ],
        },
    ]
    path = tmp_path / "systems.json"
    path.write_text(json.dumps(data))
    return path
