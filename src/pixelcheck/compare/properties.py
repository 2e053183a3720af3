"""Collect style property samples from a page and compare them with a reference."""

from collections.abc import Mapping
from typing import Any

from ..logging import get_logger
from ..model.properties import PropertyComparison, PropertyOrigin, PropertySample
from .color import extract_color
from .comparator import compare_values

logger = get_logger(__name__)

CSS_PROPERTIES: tuple[str, ...] = (
    "width",
    "height",
    "font-family",
    "font-size",
    "font-weight",
    "color",
    "background-color",
    "margin",
    "padding",
    "border",
    "border-radius",
    "display",
    "position",
    "line-height",
    "text-align",
    "letter-spacing",
    "text-transform",
    "opacity",
    "z-index",
    "gap",
    "background",
    "background-image",
    "background-size",
    "background-position",
    "box-shadow",
    "min-width",
    "max-width",
    "min-height",
    "max-height",
)


def _is_color_bearing(name: str) -> bool:
    return "color" in name or name == "border"


def build_sample(name: str, value: str, origin: PropertyOrigin) -> PropertySample:
    color = extract_color(value) if _is_color_bearing(name) else None
    return PropertySample(name=name, raw_value=value, origin=origin, color_components=color)


def samples_from_mapping(
    values: Mapping[str, Any], origin: PropertyOrigin
) -> list[PropertySample]:
    """Build samples from a plain ``{property: value}`` mapping.

    Empty and ``none`` values are dropped, the same as for computed styles.
    """
    samples = []
    for name, value in values.items():
        text = "" if value is None else str(value).strip()
        if not text or text == "none":
            continue
        samples.append(build_sample(name, text, origin))
    return samples


async def extract_properties(
    surface: Any,
    node: Any,
    properties: tuple[str, ...] = CSS_PROPERTIES,
) -> list[PropertySample]:
    """Read computed style of ``node`` as implementation samples.

    Args:
        surface: An ``IPageSurface``
        node: Node handle owned by the surface
        properties: CSS property names to read

    Returns:
        Samples in the order of ``properties``, without empty or ``none`` values
    """
    computed = await surface.computed_style(node, list(properties))
    ordered = {name: computed.get(name, "") for name in properties}
    samples = samples_from_mapping(ordered, PropertyOrigin.IMPLEMENTATION)
    logger.debug("properties_extracted", requested=len(properties), kept=len(samples))
    return samples


def compare_samples(
    implementation: list[PropertySample],
    reference: list[PropertySample],
) -> list[PropertyComparison]:
    """Pair samples by property name and compare each pair.

    Properties present on only one side are skipped.
    """
    reference_by_name = {sample.name: sample for sample in reference}
    comparisons = []
    for sample in implementation:
        other = reference_by_name.get(sample.name)
        if other is None:
            continue
        comparisons.append(
            PropertyComparison(
                name=sample.name,
                implementation=sample.raw_value,
                reference=other.raw_value,
                result=compare_values(sample.raw_value, other.raw_value),
            )
        )
    return comparisons
