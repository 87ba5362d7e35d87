"""Renderer-agnostic building blocks of a paginated report document."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReportHeader:
    """Header block printed at the top of the first page."""

    school_name: str
    address: str | None
    phones: str | None
    generated_line: str  # e.g. "Generated: 18/10/2026"


@dataclass(frozen=True)
class TableSection:
    """One table: optional title above, head row, body rows and an optional subtotal row."""

    head: list[str]
    body: list[list[str]]
    title: str | None = None
    subtotal: list[str] | None = None
    theme: str = "striped"  # striped | plain | grid
    accent: str = "#0052cc"  # head row fill
    numeric_columns: tuple[int, ...] = ()  # right-aligned
    bold_last_row: bool = False

    @property
    def rows(self) -> list[list[str]]:
        """Body rows followed by the subtotal row (if any)."""
        if self.subtotal is None:
            return list(self.body)
        return [*self.body, self.subtotal]


@dataclass(frozen=True)
class SummaryLine:
    """Totals line below the tables. tone: neutral | positive | negative."""

    text: str
    tone: str = "neutral"
    size: str = "normal"  # normal | large


@dataclass
class DocumentLayout:
    title: str
    header: ReportHeader
    sections: list[TableSection] = field(default_factory=list)
    summary: list[SummaryLine] = field(default_factory=list)
