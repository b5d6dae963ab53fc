from __future__ import annotations

from pathlib import Path

import pytest

GLUCOSE_CSV = """Index,Timestamp (YYYY-MM-DDThh:mm:ss),Event Type,Glucose Value (mg/dL)
1,2020-02-13 23:55:00,EGV,150
2,2020-02-14 08:00:00,EGV,100
3,2020-02-14 08:15:00,EGV,120
4,2020-02-14 09:05:00,EGV,90
5,,EGV,Low
"""

FOOD_CSV = """date,time_begin,logged_food,calorie,total_carb,sugar,protein
2/14/2020,2020-02-14 08:10:00,Oatmeal,50,9,1,2
2/14/2020,2020-02-14 08:50:00,Coffee,30,,0,1
2/14/2020,2020-02-14 09:05:00,Apple,20,5,4,
2/15/2020,2020-02-15 07:00:00,Toast,100,20,2,4
"""


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    (tmp_path / "Glucose.csv").write_text(GLUCOSE_CSV, encoding="utf-8")
    (tmp_path / "Food.csv").write_text(FOOD_CSV, encoding="utf-8")
    return tmp_path
