from __future__ import annotations

import csv
import io
from typing import Iterable, Mapping, Sequence

from flask import Response


def csv_response(*, rows: Iterable[Mapping], fieldnames: Sequence[str], filename: str) -> Response:
    """Write rows to a downloadable CSV response (utf-8 with BOM for Excel)."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)

    return Response(
        out.getvalue().encode("utf-8-sig"),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
