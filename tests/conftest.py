import matplotlib

matplotlib.use("Agg")

import pytest

from chart_builder.records import SeatRecord


@pytest.fixture
def legislators():
    """Small result set: 3 DPP, 4 KMT, 1 IND."""
    return [
        SeatRecord("DPP", "甲", 120000, "臺北市", "第1選區"),
        SeatRecord("KMT", "乙", 98000, "臺北市", "第2選區"),
        SeatRecord("KMT", "丙", 143000, "新北市", "第1選區"),
        SeatRecord("DPP", "丁", 87000, "臺南市", "第1選區"),
        SeatRecord("IND", "戊", 61000, "花蓮縣", "第1選區"),
        SeatRecord("KMT", "己", 98000, "臺中市", "第3選區"),
        SeatRecord("DPP", "庚", 110500, "高雄市", "第2選區"),
        SeatRecord("KMT", "辛", 75000, "桃園市", "第4選區"),
    ]
