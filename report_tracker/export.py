# export.py
import csv
import io
from datetime import date
from typing import Iterable

from .models import DailyReport

CSV_HEADER = [
    "Date",
    "Employee ID",
    "Employee Name",
    "Dials",
    "Connected Calls",
    "Positive Prospect",
    "Dead Calls",
    "Demos",
    "Admission",
    "Client Visit",
    "Client Closing",
    "Backdoor Calls",
    "Posters Done",
]


def report_row(report: DailyReport) -> list:
    return [
        report.submission_date.isoformat(),
        report.employee_id,
        report.employee_name,
        report.number_of_dials,
        report.connected_calls,
        report.positive_prospect,
        report.dead_calls,
        report.demos,
        report.admission,
        report.client_visit,
        report.client_closing,
        report.backdoor_calls,
        report.posters_done or 0,
    ]


def reports_to_csv(reports: Iterable[DailyReport]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for report in reports:
        writer.writerow(report_row(report))
    return buffer.getvalue()


def export_filename(today: date) -> str:
    return f"daily-reports-{today.isoformat()}.csv"
