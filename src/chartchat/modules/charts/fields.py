"""
ChartChat Charts - Field reference parsing.

Field names travel as ``Table.Field``; a bare name has no table qualifier.
"""

from chartchat.host.base import FieldTarget
from chartchat.modules.charts.schemas import FieldReference


def parse_field_name(name: str) -> FieldReference:
    """Split on the first dot only: "A.B.C" -> table "A", field "B.C"."""
    table, sep, field = name.partition(".")
    if not sep:
        return FieldReference(table=None, field=name)
    return FieldReference(table=table, field=field)


def measure_target(name: str) -> FieldTarget:
    ref = parse_field_name(name)
    return FieldTarget.for_measure(ref.table, ref.field)


def column_target(name: str) -> FieldTarget:
    ref = parse_field_name(name)
    return FieldTarget.for_column(ref.table, ref.field)
