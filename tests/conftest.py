"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from drug_safety_mcp.tools.dispatcher import ToolDispatcher

from fakes import RecordingOpenFDAClient


@pytest.fixture
def make_client():
    """Factory for RecordingOpenFDAClient."""

    def _make(*responses: Any, api_key: str = "") -> RecordingOpenFDAClient:
        return RecordingOpenFDAClient(list(responses), api_key=api_key)

    return _make


@pytest.fixture
def make_dispatcher(make_client):
    """Factory returning ``(dispatcher, client)`` over a RecordingOpenFDAClient."""

    def _make(*responses: Any, api_key: str = ""):
        client = make_client(*responses, api_key=api_key)
        return ToolDispatcher(client), client

    return _make


@pytest.fixture
def sample_report() -> dict[str, Any]:
    """A raw FAERS report as returned by the event endpoint."""
    return {
        "safetyreportid": "10003300",
        "receivedate": "20240115",
        "serious": "1",
        "seriousnessdeath": "1",
        "seriousnesshospitalization": "1",
        "occurcountry": "US",
        "patient": {
            "patientonsetage": "45",
            "patientonsetageunit": "801",
            "patientsex": "2",
            "patientweight": "70",
            "reaction": [
                {"reactionmeddrapt": "Nausea", "reactionoutcome": "1"},
                {"reactionmeddrapt": "Hepatic failure", "reactionoutcome": "5"},
            ],
            "drug": [
                {
                    "medicinalproduct": "HUMIRA",
                    "drugindication": "Rheumatoid arthritis",
                    "drugcharacterization": "1",
                },
                {
                    "medicinalproduct": "METHOTREXATE",
                    "drugindication": "Rheumatoid arthritis",
                    "drugcharacterization": "2",
                },
            ],
        },
    }


@pytest.fixture
def sample_label() -> dict[str, Any]:
    """A raw SPL label record."""
    return {
        "openfda": {
            "brand_name": ["HUMIRA"],
            "generic_name": ["ADALIMUMAB"],
            "manufacturer_name": ["AbbVie Inc."],
            "product_type": ["HUMAN PRESCRIPTION DRUG"],
            "route": ["SUBCUTANEOUS"],
        },
        "boxed_warning": [
            "WARNING: SERIOUS INFECTIONS AND MALIGNANCY. Tuberculosis and Lymphoma "
            "have been reported."
        ],
        "adverse_reactions": [
            "The most common adverse reactions are Injection site reactions, "
            "Headache and Rash."
        ],
        "warnings_and_cautions": ["Serious infections may occur."],
        "pediatric_use": ["Safety in pediatric patients under 2 years is not established."],
        "geriatric_use": ["Infections were more frequent in patients over 65."],
        "pregnancy": ["Pregnancy Category B. Adalimumab crosses the placenta."],
        "lactation": ["Adalimumab is present in human milk at low levels."],
    }


@pytest.fixture
def sample_recall() -> dict[str, Any]:
    """A raw enforcement report."""
    return {
        "recall_number": "D-0123-2024",
        "classification": "Class II",
        "status": "Ongoing",
        "recall_initiation_date": "20240102",
        "report_date": "20240110",
        "reason_for_recall": "Failed dissolution specifications",
        "product_description": "Metformin HCl ER tablets, 500 mg",
        "recalling_firm": "Example Pharma",
    }
