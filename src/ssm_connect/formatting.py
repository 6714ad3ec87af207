from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import InstanceRecord

INSTANCE_COLUMNS = ("name", "computer_name", "instance_id", "private_ip")
COLUMN_SEPARATOR = " | "


def align_columns(rows: Iterable[Sequence[str]]) -> list[tuple[str, ...]]:
    """Right-pad every cell to the widest value seen in its column.

    Rows may have different lengths; missing cells do not count towards a
    column's width. Reapplying to already aligned rows returns them unchanged.
    """
    materialized = [tuple(row) for row in rows]
    widths: list[int] = []
    for row in materialized:
        for index, cell in enumerate(row):
            if index == len(widths):
                widths.append(0)
            widths[index] = max(widths[index], len(cell))
    return [tuple(cell.ljust(widths[index]) for index, cell in enumerate(row)) for row in materialized]


def instance_rows(records: Sequence[InstanceRecord]) -> list[tuple[str, ...]]:
    return align_columns(
        tuple(getattr(record, column) for column in INSTANCE_COLUMNS) for record in records
    )


def instance_detail(record: InstanceRecord) -> str:
    return (
        f"PublicIP: {record.public_ip} | PlatformType: {record.platform_type} | "
        f"PlatformName: {record.platform_name} | Agent: {record.agent_state} | "
        f"State: {record.instance_state}"
    )
