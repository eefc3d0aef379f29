"""CSV exporter for form responses."""
import csv
import io
import re
from pathlib import Path
from typing import Iterable, List, Sequence

from snapformapi.models.form import ResponseOut

BASE_COLUMNS: Sequence[str] = ("ID", "Email", "Submitted At")


def field_labels(responses: Sequence[ResponseOut]) -> List[str]:
    """Distinct field labels in the order they are first seen."""
    labels: List[str] = []
    for response in responses:
        for label in response.fields:
            if label not in labels:
                labels.append(label)
    return labels


def _response_row(response: ResponseOut, labels: Sequence[str]) -> list:
    submitted_at = response.created_at.strftime("%Y-%m-%d %H:%M:%S") if response.created_at else ""
    row = [response.id, response.email or "", submitted_at]
    for label in labels:
        value = response.fields.get(label)
        row.append(value.value if value else "")
    return row


def responses_to_csv(responses: Iterable[ResponseOut]) -> str:
    responses = list(responses)
    labels = field_labels(responses)

    buffer = io.StringIO()
    # ids stay bare, every text cell is quoted
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(list(BASE_COLUMNS) + labels)
    for response in responses:
        writer.writerow(_response_row(response, labels))
    return buffer.getvalue()


def export_filename(form_name: str) -> str:
    return re.sub(r"\s+", "_", form_name) + "_responses.csv"


def export_responses(responses: Iterable[ResponseOut], path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as fh:
        fh.write(responses_to_csv(responses))
    return path


__all__ = ["responses_to_csv", "export_filename", "export_responses", "BASE_COLUMNS"]
