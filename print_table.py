"""
Console tables for task output.

    print_table({"name": "Veridca", "address": "0x..."}, "Deployment")

╔═════════════════════╗
║     Deployment      ║
╟─────────┬───────────╢
║ name    │ Veridca   ║
╟─────────┼───────────╢
║ address │ 0x...     ║
╚═════════╧═══════════╝
"""

import textwrap
from typing import Any, List, Mapping, Optional

TRUNCATE = 100


def _cell(value: Any, truncate: int) -> str:
    text = "" if value is None else str(value)
    if len(text) > truncate:
        text = text[:truncate - 1] + "…"
    return text


def _rows(data) -> List[List[Any]]:
    if isinstance(data, Mapping):
        content = [[k, v] for k, v in data.items()]
    else:
        content = data
    if not isinstance(content, (list, tuple)):
        return [[content]]
    rows = [(list(r) or [""]) if isinstance(r, (list, tuple)) else [r] for r in content]
    return rows or [[""]]


def _wrap(text: str, width: int) -> List[str]:
    lines = []
    for paragraph in text.split("\n") or [""]:
        lines.extend(textwrap.wrap(paragraph, width=width, break_long_words=True) or [""])
    return lines


def render_table(data, header: str = "Result", truncate: int = TRUNCATE, width: Optional[int] = None) -> str:
    rows = _rows(data)
    columns = max(len(r) for r in rows)
    cells = [[_cell(r[i] if i < len(r) else "", truncate) for i in range(columns)] for r in rows]

    widths = []
    for i in range(columns):
        longest = max((len(line) for row in cells for line in row[i].split("\n")), default=0)
        widths.append(max(1, min(longest, width) if width else longest))

    # Spanning header needs the full inner width
    inner = sum(widths) + 3 * (columns - 1)
    if header and len(header) > inner:
        widths[-1] += len(header) - inner
        inner = len(header)

    def rule(left, fill, join, right):
        return left + join.join(fill * (w + 2) for w in widths) + right

    out = []
    if header:
        out.append("╔" + "═" * (inner + 2) + "╗")
        out.append("║ " + header.center(inner) + " ║")
        out.append(rule("╟", "─", "┬", "╢"))
    else:
        out.append(rule("╔", "═", "╤", "╗"))

    for index, row in enumerate(cells):
        wrapped = [_wrap(text, widths[i]) for i, text in enumerate(row)]
        height = max(len(w) for w in wrapped)
        for line in range(height):
            parts = [(w[line] if line < len(w) else "").ljust(widths[i]) for i, w in enumerate(wrapped)]
            out.append("║ " + " │ ".join(parts) + " ║")
        if index < len(cells) - 1:
            out.append(rule("╟", "─", "┼", "╢"))

    out.append(rule("╚", "═", "╧", "╝"))
    return "\n".join(out)


def print_table(data, header: str = "Result", **kwargs):
    print(render_table(data, header, **kwargs))
