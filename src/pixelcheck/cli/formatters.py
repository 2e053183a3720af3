"""Output formatters for CLI results.

Provides JSON (machine-readable) and plain text renderings of property
comparisons and capture results.
"""

import json
from typing import Any

from ..compare.comparator import format_color_for_display
from ..model.properties import ComparisonResult, PropertyComparison


def format_comparison(left: str, right: str, result: ComparisonResult, format_type: str) -> str:
    """Format a single value comparison.

    Args:
        left: Implementation value as given
        right: Reference value as given
        result: Comparison outcome
        format_type: Output format ("json" or "text")

    Raises:
        ValueError: If format_type is not recognized
    """
    if format_type == "json":
        return json.dumps({"left": left, "right": right, **result.to_dict()}, indent=2)
    elif format_type == "text":
        status = "MATCH" if result.is_match else "MISMATCH"
        return (
            f"{status} ({result.value_class.value}, confidence {result.confidence:.2f})\n"
            f"  implementation: {result.normalized_left}\n"
            f"  reference:      {result.normalized_right}"
        )
    else:
        raise ValueError(f"Unknown format type: {format_type}")


def format_comparisons(comparisons: list[PropertyComparison], format_type: str) -> str:
    """Format a property-by-property comparison table."""
    matched = sum(1 for c in comparisons if c.result.is_match)
    summary = {"total": len(comparisons), "matched": matched, "mismatched": len(comparisons) - matched}

    if format_type == "json":
        return json.dumps(
            {"summary": summary, "properties": [c.to_dict() for c in comparisons]}, indent=2
        )
    elif format_type == "text":
        return _format_text_table(comparisons, summary)
    else:
        raise ValueError(f"Unknown format type: {format_type}")


def _format_text_table(comparisons: list[PropertyComparison], summary: dict[str, Any]) -> str:
    if not comparisons:
        return "No shared properties to compare"

    name_width = max(len(c.name) for c in comparisons)
    lines = []
    for comparison in comparisons:
        mark = "✓" if comparison.result.is_match else "✗"
        implementation = format_color_for_display(comparison.implementation)
        reference = format_color_for_display(comparison.reference)
        lines.append(
            f"{mark} {comparison.name:<{name_width}}  {implementation}  vs  {reference}"
            f"  [{comparison.result.confidence:.2f}]"
        )
    lines.append("")
    lines.append(
        f"{summary['matched']}/{summary['total']} properties match "
        f"({summary['mismatched']} mismatched)"
    )
    return "\n".join(lines)


def format_capture(paths: list[str], metadata: dict[str, Any], format_type: str) -> str:
    """Format the files written by a capture."""
    if format_type == "json":
        return json.dumps({"files": paths, "page_metadata": metadata}, indent=2)
    lines = [f"Wrote {path}" for path in paths]
    lines.append(
        f"{metadata['browser_name']} / {metadata['device_class']} / "
        f"viewport {metadata['viewport_size']}"
    )
    return "\n".join(lines)
