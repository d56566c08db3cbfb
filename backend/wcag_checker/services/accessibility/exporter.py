from __future__ import annotations

import pandas as pd

from .catalog import get_criterion
from .models import AnalysisAggregate

CRITERIA_COLUMNS = [
    "Criterion",
    "Name",
    "Level",
    "Principle",
    "Status",
    "Errors",
    "Warnings",
    "Issue types",
    "Affected elements",
    "Top issue",
]

CSV_COLUMNS = [
    "No.",
    "Criterion",
    "Name",
    "Level",
    "Status",
    "Errors",
    "Warnings",
    "Affected elements",
    "Top issue",
]


def build_dataframe(aggregate: AnalysisAggregate) -> pd.DataFrame:
    rows = []
    for bucket in aggregate.sorted_buckets():
        reference = get_criterion(bucket.criterion)
        rows.append(
            {
                "Criterion": bucket.criterion,
                "Name": reference.name if reference else "",
                "Level": reference.level if reference else "",
                "Principle": reference.principle if reference else "",
                "Status": bucket.status.value,
                "Errors": bucket.error_count,
                "Warnings": bucket.warning_count,
                "Issue types": len(bucket.issues),
                "Affected elements": bucket.total_affected_elements,
                "Top issue": bucket.issues[0].message if bucket.issues else "",
            }
        )
    dataframe = pd.DataFrame(rows)
    return dataframe.reindex(columns=CRITERIA_COLUMNS)


def build_csv_view(dataframe: pd.DataFrame) -> pd.DataFrame:
    if dataframe.empty:
        return pd.DataFrame(columns=CSV_COLUMNS)

    output = dataframe.copy()
    output.insert(0, "No.", [str(index) for index in range(1, len(output) + 1)])
    output["Name"] = output["Name"].fillna("").astype(str)
    output["Level"] = output["Level"].fillna("").astype(str)
    output["Top issue"] = output["Top issue"].fillna("").astype(str).str.slice(0, 100)
    return output.reindex(columns=CSV_COLUMNS)


def export_csv(aggregate: AnalysisAggregate) -> str:
    return build_csv_view(build_dataframe(aggregate)).to_csv(index=False)
