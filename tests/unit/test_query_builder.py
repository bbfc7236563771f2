"""Unit tests for the openFDA search-expression builders."""

import pytest

from drug_safety_mcp.services import query_builder as qb


class TestDrugSearch:
    def test_or_of_three_fields(self):
        assert qb.build_drug_search("Humira") == (
            '(patient.drug.openfda.brand_name:"Humira"'
            '+OR+patient.drug.openfda.generic_name:"Humira"'
            '+OR+patient.drug.medicinalproduct:"Humira")'
        )

    def test_embedded_quotes_are_escaped(self):
        search = qb.build_drug_search('drug "x"')

        assert 'brand_name:"drug \\"x\\""' in search
        # every raw quote is either a delimiter or escaped
        assert search.count('"') == 12
        assert search.count('\\"') == 6

    def test_label_search(self):
        assert qb.build_label_search("metformin") == (
            '(openfda.brand_name:"metformin"+OR+openfda.generic_name:"metformin")'
        )


class TestJoin:
    def test_join_and_skips_empty_clauses(self):
        assert qb.join_and("a:1", "", "b:2", "") == "a:1+AND+b:2"

    def test_join_and_single_clause(self):
        assert qb.join_and("a:1") == "a:1"


class TestDateRange:
    def test_both_absent_is_empty(self):
        assert qb.build_date_range(None, None) == ""

    def test_both_bounds(self):
        assert qb.build_date_range("20200101", "20231231") == "receivedate:[20200101+TO+20231231]"

    def test_open_start(self):
        assert qb.build_date_range(None, "20231231") == "receivedate:[19000101+TO+20231231]"

    def test_open_end(self):
        assert qb.build_date_range("20200101", None) == "receivedate:[20200101+TO+29991231]"


class TestAgeClause:
    @pytest.mark.parametrize(
        "bracket, low, high",
        [
            ("neonate", 0, 0),
            ("infant", 0, 1),
            ("child", 2, 11),
            ("adolescent", 12, 17),
            ("pediatric", 0, 17),
            ("adult", 18, 64),
            ("65_to_74", 65, 74),
            ("85_plus", 85, 150),
            ("geriatric", 65, 150),
        ],
    )
    def test_bracket_range_always_in_years(self, bracket, low, high):
        assert qb.build_age_clause(bracket) == (
            f"(patient.patientonsetage:[{low}+TO+{high}]"
            "+AND+patient.patientonsetageunit:801)"
        )

    def test_unknown_bracket_raises(self):
        with pytest.raises(ValueError, match="toddler"):
            qb.build_age_clause("toddler")


class TestEventSearch:
    def test_drug_only(self):
        assert qb.compose_event_search("aspirin") == qb.build_drug_search("aspirin")

    def test_all_filters_in_order(self):
        search = qb.compose_event_search(
            "aspirin",
            reaction="nausea",
            start_date="20200101",
            end_date=None,
            serious=True,
        )

        assert search == (
            qb.build_drug_search("aspirin")
            + '+AND+patient.reaction.reactionmeddrapt:"nausea"'
            + "+AND+receivedate:[20200101+TO+29991231]"
            + "+AND+serious:1"
        )

    def test_serious_clause_with_outcome(self):
        assert qb.build_serious_clause("death") == "serious:1+AND+seriousnessdeath:1"

    def test_serious_clause_without_outcome(self):
        assert qb.build_serious_clause() == "serious:1"

    def test_reactions_any(self):
        assert qb.build_reactions_any(["A", "B"]) == (
            '(patient.reaction.reactionmeddrapt:"A"+OR+patient.reaction.reactionmeddrapt:"B")'
        )


class TestOtherSearches:
    def test_indication(self):
        assert qb.build_indication_search("type 2 diabetes") == (
            'patient.drug.drugindication:"type 2 diabetes"'
        )

    @pytest.mark.parametrize("class_type", ["epc", "moa", "pe", "cs"])
    def test_drug_class_field(self, class_type):
        assert qb.build_drug_class_search("TNF Blocker [EPC]", class_type) == (
            f'patient.drug.openfda.pharm_class_{class_type}:"TNF Blocker [EPC]"'
        )

    def test_drug_class_unknown_type(self):
        with pytest.raises(ValueError):
            qb.build_drug_class_search("X", "atc")

    def test_recall_with_filters(self):
        search = qb.build_recall_search("metformin", "Class I", "Ongoing")

        assert search.startswith('(product_description:"metformin"+OR+')
        assert search.endswith('+AND+classification:"Class I"+AND+status:"Ongoing"')

    def test_recall_without_filters(self):
        assert "classification" not in qb.build_recall_search("metformin")
