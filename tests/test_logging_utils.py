import csv

import pytest

from bbox2d import logging_utils
from bbox2d.geometry import Box
from bbox2d.logging_utils import CSV_HEADER, CsvLogger, hz_to_dt, rate_limited_print


def test_hz_to_dt():
    assert hz_to_dt(10) == pytest.approx(0.1)
    assert hz_to_dt(0) == pytest.approx(10.0)
    assert hz_to_dt("bad") == pytest.approx(10.0)


def test_rate_limited_print(monkeypatch, capsys):
    clock = iter([100.0, 100.05, 100.3])
    monkeypatch.setattr(logging_utils, "now", lambda: next(clock))
    state = {}
    assert rate_limited_print("a", 5.0, state) is True
    assert rate_limited_print("b", 5.0, state) is False
    assert rate_limited_print("c", 5.0, state) is True
    assert capsys.readouterr().out == "a\nc\n"


class TestCsvLogger:
    def test_disabled_writes_nothing(self, tmp_path):
        path = tmp_path / "logs" / "d.csv"
        logger = CsvLogger(path)
        logger.open()
        logger.log(Box(0, 0, 1, 1))
        logger.close()
        assert not path.exists()

    def test_header_once_and_rows(self, tmp_path):
        path = tmp_path / "logs" / "d.csv"
        with CsvLogger(path, enabled=True) as logger:
            logger.log(Box(1, 2, 3, 4, class_index=0, confidence=0.9), label="person")
        with CsvLogger(path, enabled=True) as logger:
            logger.log(Box(5, 6, 7, 8, class_index=2, confidence=0.5), label="car")

        with open(path, newline="", encoding="utf-8") as fh:
            rows = list(csv.reader(fh))
        assert rows[0] == CSV_HEADER
        assert len(rows) == 3
        assert rows[1][1:] == ["0", "person", "0.9000", "1.000", "2.000", "3.000", "4.000"]
        assert rows[2][2] == "car"
