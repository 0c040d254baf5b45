"""Advisory diagnostics collected while generating Java."""

from __future__ import annotations


class Diagnostic:
    """A translation warning with location."""

    def __init__(self, line: int, col: int, category: str, message: str):
        self.line: int = line
        self.col: int = col
        self.category: str = category
        self.message: str = message

    def __repr__(self) -> str:
        return (
            "warning:"
            + str(self.line)
            + ":"
            + str(self.col)
            + ": ["
            + self.category
            + "] "
            + self.message
        )


class DiagnosticLog:
    """Ordered diagnostics of one backend run."""

    def __init__(self) -> None:
        self.items: list[Diagnostic] = []

    def add(self, line: int, col: int, category: str, message: str) -> Diagnostic:
        diag = Diagnostic(line, col, category, message)
        self.items.append(diag)
        return diag

    def by_category(self, category: str) -> list[Diagnostic]:
        return [d for d in self.items if d.category == category]

    def __len__(self) -> int:
        return len(self.items)
