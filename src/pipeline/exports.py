"""
src/pipeline/exports.py

Write pipeline results to disk in JSON, CSV, and PDF formats.

Provides:
- export_json(result, path): the FactoryResult as camelCase JSON
- export_trace_csv(trace, path): one row per trace event
- export_report_pdf(result, path): one-page conformance summary (ReportLab)

Notes:
- Trace events are open-ended records; the CSV header is the union of their keys,
  in first-seen order.
"""


import csv
import json
from pathlib import Path
from typing import Any, List, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from pipeline.models import DryRunOutcome, ExecutionOutcome, FactoryResult, TraceQueryOutcome


PathLike = Union[str, Path]


# --- JSON ----------------------------------------------------------------------
def export_json(result: FactoryResult, path: PathLike) -> str:
    """
    Export a FactoryResult exactly as the live runner prints it.

    Returns: path
    """

    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.to_wire(), f, indent=2, ensure_ascii=False)

    return str(path)


# --- CSV -----------------------------------------------------------------------
def export_trace_csv(trace: TraceQueryOutcome, path: PathLike) -> str:
    """
    Export trace events to CSV. Missing keys are left blank; nested values are JSON-encoded.

    Returns: path
    """

    if not trace.events:
        raise ValueError(f"No events to export for run {trace.run_id}.")

    headers: List[str] = []
    for ev in trace.events:
        for key in ev:
            if key not in headers:
                headers.append(key)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=headers, restval="")
        writer.writeheader()
        for ev in trace.events:
            writer.writerow({k: _cell(v) for k, v in ev.items()})

    return str(path)

def _cell(value: Any) -> Any:

    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)

    return value


# --- PDF -----------------------------------------------------------------------
def _summary_rows(result: FactoryResult) -> List[List[str]]:

    rows = [["Stage", "Status", "Detail"]]

    spec = result.spec_result
    if isinstance(spec, DryRunOutcome):
        rows.append(["execute_spec", "ok", "dry_run: spec and dag returned"])
    elif isinstance(spec, ExecutionOutcome):
        rows.append(["execute_spec", "ok", "execute" + (" (failure analysis attached)" if spec.analysis is not None else "")])
    else:
        rows.append(["execute_spec", "failed", result.spec_error or ""])

    trace = result.trace_result
    if trace is None:
        rows.append(["query_trace", "skipped", ""])
    else:
        rows.append(["query_trace", "ok", f"{trace.run_id}: {len(trace.events)}/{trace.total_events} events ({trace.source})"])

    reg = result.registry_result
    if reg is None:
        rows.append(["registry_import", "skipped", ""])
    else:
        rows.append(["registry_import", "ok", f"{reg.entry.id} ({reg.entry.provider}), persisted={reg.persisted}"])

    return rows

def export_report_pdf(result: FactoryResult, path: PathLike, title: str = "Spec factory conformance report") -> str:
    """
    Export a one-page summary of a pipeline run.

    Returns: path
    """

    doc = SimpleDocTemplate(str(path), pagesize=A4)
    styles = getSampleStyleSheet()
    elements = []

    elements.append(Paragraph(f"<b>{escape(title)}</b>", styles["Title"]))
    elements.append(Spacer(1, 12))

    table = Table(_summary_rows(result), colWidths=[110, 60, 320])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    elements.append(table)

    reg = result.registry_result
    if reg is not None and reg.warnings:
        elements.append(Spacer(1, 12))
        elements.append(Paragraph("Registry warnings", styles["Heading2"]))
        for w in reg.warnings:
            elements.append(Paragraph(f"- {escape(w)}", styles["Normal"]))

    doc.build(elements)

    return str(path)


def export_report(result: FactoryResult, path: PathLike) -> str:
    """Pick the format from the file suffix: .pdf gets the PDF summary, .csv the trace events, anything else JSON."""

    suffix = Path(path).suffix.lower()
    if suffix == ".pdf":
        return export_report_pdf(result, path)
    if suffix == ".csv":
        if result.trace_result is None:
            raise ValueError("A .csv report needs trace events; pass --trace-run-id.")
        return export_trace_csv(result.trace_result, path)

    return export_json(result, path)
