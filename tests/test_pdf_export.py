import pytest
import sys
from pathlib import Path
import os

import pandas as pd

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from shift_grid.data_manager import DataManager
from shift_grid.models import ForbiddenInterval
from shift_grid.reporting import ExportManager
from shift_grid.time_model import parse_slot, to_index


@pytest.fixture
def data_manager():
    """DataManager seeded with two employees and a morning of assignments."""
    dm = DataManager()
    dm.add_employee(
        "Alice & Co",
        teams=["Service"],
        expected_hours=2,
        forbidden_hours=[ForbiddenInterval("1", to_index("12:00"), to_index("13:00"), "Lunch")]
    )
    dm.add_employee("Bob", teams=["Kitchen"], expected_hours=0.5)
    for label in ("09:00", "09:30"):
        dm.store.add("1", "1", parse_slot(label), "Main Hall")
    dm.store.add("2", "1", parse_slot("09:00"), "Main Hall")
    return dm


@pytest.fixture
def export_manager(data_manager):
    """Fixture for an ExportManager instance."""
    return ExportManager(data_manager)


def test_day_grid_dataframe(export_manager, data_manager):
    grid = export_manager.report_generator.create_day_grid_dataframe("1")

    assert list(grid.columns) == data_manager.location_names()
    assert grid.index.name == "Time"
    assert len(grid) == 32
    assert grid.loc["09:00", "Main Hall"] == "Alice & Co, Bob"
    assert grid.loc["09:00", "Kitchen"] == ""


def test_location_named_time_keeps_its_own_column(export_manager, data_manager, tmp_path):
    data_manager.add_location("Time", ["Service"])
    data_manager.store.add("2", "1", parse_slot("10:00"), "Time")

    grid = export_manager.report_generator.create_day_grid_dataframe("1")
    assert list(grid.columns).count("Time") == 1
    assert list(grid.index[:2]) == ["08:00", "08:30"]
    assert grid.loc["10:00", "Time"] == "Bob"

    output_path = tmp_path / "day1.pdf"
    assert export_manager.export_schedule("1", "pdf", str(output_path))


def test_hours_dataframe(export_manager):
    hours = export_manager.report_generator.create_hours_dataframe()
    assert list(hours["Status"]) == ["Needs 1 more hours", "Fully scheduled"]
    assert list(hours["Assigned_Hours"]) == [1.0, 0.5]


def test_forbidden_dataframe(export_manager):
    forbidden = export_manager.report_generator.create_forbidden_dataframe()
    assert forbidden.to_dict("records") == [
        {"Employee": "Alice & Co", "Day": "1", "Start": "12:00", "End": "13:00", "Reason": "Lunch"}
    ]


def test_pdf_export_basic(export_manager, tmp_path):
    """Test PDF export works on valid seeded data."""
    output_path = tmp_path / "day1.pdf"
    assert export_manager.export_schedule("1", "pdf", str(output_path))
    assert os.path.getsize(output_path) > 200


def test_pdf_export_empty_day(export_manager, tmp_path):
    """A day with no assignments still renders the grid."""
    output_path = tmp_path / "day3.pdf"
    assert export_manager.export_schedule("3", "pdf", str(output_path))
    assert output_path.exists()


def test_excel_export(export_manager, tmp_path):
    output_path = tmp_path / "schedule.xlsx"
    assert export_manager.export_schedule("1", "excel", str(output_path))

    sheets = pd.ExcelFile(output_path).sheet_names
    assert sheets == ["Day 1", "Day 2", "Day 3", "Hours", "Forbidden Hours"]


def test_csv_export(export_manager, tmp_path):
    output_path = tmp_path / "day1.csv"
    assert export_manager.export_schedule("1", "csv", str(output_path))

    grid = pd.read_csv(output_path, keep_default_na=False)
    assert grid.loc[grid["Time"] == "09:00", "Main Hall"].iloc[0] == "Alice & Co, Bob"


def test_pdf_export_to_missing_directory_fails(export_manager, tmp_path):
    assert not export_manager.export_schedule("1", "pdf", str(tmp_path / "missing" / "day1.pdf"))


def test_unsupported_format(export_manager, tmp_path):
    with pytest.raises(ValueError):
        export_manager.export_schedule("1", "docx", str(tmp_path / "day1.docx"))


def test_default_filename(export_manager):
    assert export_manager.get_default_filename("2", "excel").startswith("shift_schedule_day2_")
    assert export_manager.get_default_filename("2", "excel").endswith(".xlsx")
    assert export_manager.get_default_filename("2", "pdf").endswith(".pdf")


def test_batch_export(export_manager, tmp_path):
    results = export_manager.batch_export("1", str(tmp_path / "out"))
    assert results == {"pdf": True, "excel": True, "csv": True}
    assert len(list((tmp_path / "out").iterdir())) == 3
