import os

import pytest

from k6_comparer.reporting import CollectingReporter
from k6_comparer.table import ResultRow

SAMPLES_DIR = os.path.join(os.path.dirname(__file__), "..", "samples")

SUMMARY_LINE = (
    "http_req_duration.......: avg=12.3ms min=1ms med=10ms max=99ms "
    "p(90)=40ms p(95)=60ms"
)
PERCENTAGE_LINE = "http_req_failed.......: 2.50% 5 out of 200"


@pytest.fixture
def summary_line():
    return SUMMARY_LINE


@pytest.fixture
def percentage_line():
    return PERCENTAGE_LINE


@pytest.fixture
def reporter():
    return CollectingReporter()


@pytest.fixture
def samples_dir():
    return os.path.abspath(SAMPLES_DIR)


@pytest.fixture
def source_folders(tmp_path):
    """Two source folders with one k6 summary each, plus a stray file."""
    azure = tmp_path / "Azure With Content"
    cloud = tmp_path / "Cloud With Content"
    azure.mkdir()
    cloud.mkdir()
    (azure / "Azure-Load.txt").write_text(
        f"{SUMMARY_LINE}\n{PERCENTAGE_LINE}\n"
        "http_reqs......................: 200    5.71704/s\n",
        encoding="utf-8",
    )
    (cloud / "Cloud-Load.txt").write_text(
        "http_req_duration..............: avg=41.7ms min=18.4ms med=35.2ms "
        "max=1.8s p(90)=70.9ms p(95)=95.3ms\n"
        "http_req_failed................: 0.00%  0 out of 200\n",
        encoding="utf-8",
    )
    (cloud / "notes.md").write_text("not a result file\n", encoding="utf-8")
    return [str(azure), str(cloud)]


@pytest.fixture
def result_rows():
    """Rows as load_results would return them for two sources."""
    return [
        ResultRow("Azure With Content", "Load", "http_req_duration",
                  {"Avg": "25.53ms", "Min": "10.2ms", "Med": "20.1ms",
                   "Max": "1.05s", "P90": "40.3ms", "P95": "60.2ms"}),
        ResultRow("Azure With Content", "Load", "http_req_failed",
                  {"Percentage": "0.00%", "Count": "0", "Total": "200"}),
        ResultRow("Azure With Content", "Load", "http_reqs",
                  {"Value": "200", "Rate": "5.71704/s"}),
        ResultRow("Azure With Content", "Load", "vus_max",
                  {"Value": "10", "Min": "10", "Max": "10"}),
        ResultRow("Cloud With Content", "Load", "http_req_duration",
                  {"Avg": "41.7ms", "Min": "18.4ms", "Med": "35.2ms",
                   "Max": "1.8s", "P90": "70.9ms", "P95": "95.3ms"}),
        ResultRow("Cloud With Content", "Load", "http_req_failed",
                  {"Percentage": "2.50%", "Count": "5", "Total": "200"}),
        ResultRow("Cloud With Content", "Load", "http_reqs",
                  {"Value": "200", "Rate": "4.98213/s"}),
        ResultRow("Umbraco Cloud", "Load", "http_req_duration",
                  {"Avg": "33ms", "P95": "80ms"}),
    ]
