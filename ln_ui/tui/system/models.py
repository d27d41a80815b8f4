from dataclasses import dataclass


@dataclass
class TableModel:
    title: str
    columns: list[str]
    rows: list[list[str]]


@dataclass(frozen=True)
class LogLine:
    source: str
    text: str
