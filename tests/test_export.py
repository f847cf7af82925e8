"""
Tests for the CSV report.
"""
from datetime import date

from imihigo.constants import EXPORT_HEADERS
from imihigo.managers import export, mutator
from imihigo.models.contract import Contract


class TestFlatten:
    """Test one row per indicator."""

    def test_rows_in_document_order(self, sample_contract):
        rows = list(export.flatten(sample_contract))
        assert [row.indicator for row in rows] == [
            "Fertilizer used (Tons)",
            "Farmer schools",
            "Seed kits",
            "Clinics opened",
        ]

    def test_row_carries_ancestor_names(self, sample_contract):
        row = list(export.flatten(sample_contract))[3]
        assert (row.pillar, row.sector, row.outcome, row.output) == (
            "Social", "Health", "Access", "Clinics",
        )

    def test_figures(self, sample_contract):
        row = next(export.flatten(sample_contract))
        assert row.baseline == "500"
        assert row.source_of_data == "Ministry of Agriculture Reports"
        assert row.annual_target == "1000"
        assert (row.q1_target, row.q1_achievement) == ("250", "240")
        assert (row.q4_target, row.q4_achievement) == ("250", "0")
        assert row.total_achievement == "600"
        assert row.progress == "60.00"

    def test_zero_target_progress(self, sample_contract):
        row = list(export.flatten(sample_contract))[3]
        assert row.progress == "0.00"

    def test_fractional_figures(self, mock_data):
        ind = mock_data.create_indicator("i", "Km", ((2.5, 1.25), (0, 0), (0, 0), (0, 0)))
        contract = Contract([
            mock_data.create_pillar("p", "P", [
                mock_data.create_sector("s", "S", [
                    mock_data.create_outcome("o", "O", [
                        mock_data.create_output("op", "OP", [ind]),
                    ]),
                ]),
            ]),
        ])
        row = next(export.flatten(contract))
        assert row.q1_target == "2.5"
        assert row.total_achievement == "1.25"
        assert row.progress == "50.00"


class TestCsv:
    """Test the rendered CSV text."""

    def test_header_line(self, sample_contract):
        lines = export.to_csv(sample_contract).split("\n")
        assert lines[0] == ",".join(EXPORT_HEADERS)
        assert len(lines) == 5

    def test_every_field_is_quoted(self, sample_contract):
        line = export.to_csv(sample_contract).split("\n")[1]
        assert line.startswith('"Economic","Agriculture","Productivity","Fertilizer",')
        assert line.endswith(',"600","60.00"')

    def test_embedded_quotes_are_doubled(self, sample_contract):
        contract = mutator.rename_node(sample_contract, "p-1", 'The "Big" Pillar')
        line = export.to_csv(contract).split("\n")[1]
        assert line.startswith('"The ""Big"" Pillar",')

    def test_empty_contract_has_header_only(self):
        assert export.to_csv(Contract()) == ",".join(EXPORT_HEADERS)

    def test_quote(self):
        assert export.quote('a"b') == '"a""b"'
        assert export.quote("") == '""'


class TestFilename:
    def test_report_filename(self):
        assert export.report_filename(date(2024, 3, 9)) == "imihigo_report_2024-03-09.csv"
