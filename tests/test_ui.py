import os
import sys
from datetime import date

import pytest

from ptax_calculator.cli import ui as ui_launcher
from ptax_calculator.dataset import DATA_DIR_ENV
from ptax_calculator.models import Gender
from ptax_calculator.ui.app import MAX_SALARY, installment_table, validate_form


@pytest.mark.unit
def test_installment_table_marks_overrides(engine):
    outcome = engine.compute_tax(28, 30000, Gender.ALL, date(2026, 2, 10))
    rows = installment_table(outcome)

    assert len(rows) == 12
    assert rows[0] == {"Period": "April", "Amount": "₹200", "Frequency": "Monthly", "Override": ""}
    assert rows[10] == {"Period": "February", "Amount": "₹300", "Frequency": "Monthly", "Override": "Yes"}


@pytest.mark.unit
def test_installment_table_empty_for_no_applicable(engine):
    outcome = engine.compute_tax(6, 30000, Gender.ALL, date(2026, 2, 10))
    assert installment_table(outcome) == []


@pytest.mark.unit
def test_validate_form():
    assert validate_form(25000.0) is None
    assert validate_form(0.0) == "Please enter a valid salary amount."
    assert "too high" in validate_form(MAX_SALARY + 1)


@pytest.mark.unit
def test_launcher_passes_data_dir_and_streamlit_args(tmp_path, monkeypatch):
    launched = []
    monkeypatch.setattr(ui_launcher.stcli, "main", lambda: launched.append(list(sys.argv)) or 0)
    monkeypatch.setattr(sys, "argv", ["ptax-ui", "--data-dir", str(tmp_path), "--server.port", "8600"])
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)

    with pytest.raises(SystemExit) as excinfo:
        ui_launcher.main()

    assert excinfo.value.code == 0
    assert launched[0][:2] == ["streamlit", "run"]
    assert launched[0][2].endswith("app.py")
    assert launched[0][3:] == ["--server.port", "8600"]
    assert os.environ[DATA_DIR_ENV] == str(tmp_path.resolve())


@pytest.mark.unit
def test_launcher_rejects_missing_data_dir(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["ptax-ui", "--data-dir", str(tmp_path / "missing")])

    with pytest.raises(SystemExit) as excinfo:
        ui_launcher.main()

    assert excinfo.value.code == 1
    assert "Data directory not found" in capsys.readouterr().err
