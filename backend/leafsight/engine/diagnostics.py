"""Human-readable report of a classification run. Advisory only."""

from __future__ import annotations

from leafsight.engine.classifier import MAJORITY, ClassificationResult


def format_report(result: ClassificationResult) -> str:
    lines = [f"K = {result.k} CLOSEST MATCHES"]
    width = max((len(n.label) for n in result.neighbors), default=0)
    for rank, n in enumerate(result.neighbors, start=1):
        lines.append(f"  {rank:>2}. {n.label:<{width}}  {n.distance:.6g}  (row {n.index})")

    votes = ", ".join(f"{label}={count}" for label, count in result.votes.items())
    if result.resolution == MAJORITY:
        lines.append(f"Votes: {votes} -> single majority class")
    else:
        lines.append(f"Votes: {votes} -> count tie, smallest mean distance wins")
    lines.append(f"Predicted class: {result.label}")
    return "\n".join(lines)
