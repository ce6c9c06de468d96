"""
Categorical color schemes used to color nodes by label.
"""
import logging
from typing import Dict, List

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "neodash"

CATEGORICAL_COLOR_SCHEMES: Dict[str, List[str]] = {
    "neodash": [
        "#588c7e", "#f2e394", "#f2ae72", "#d96459", "#5b9aa0", "#d6d4e0", "#b8a9c9",
        "#622569", "#ddd5af", "#d9ad7c", "#a2836e", "#674d3c", "grey",
    ],
    "category10": [
        "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
        "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
    ],
    "set1": [
        "#e41a1c", "#377eb8", "#4daf4a", "#984ea3", "#ff7f00",
        "#ffff33", "#a65628", "#f781bf", "#999999",
    ],
    "set2": [
        "#66c2a5", "#fc8d62", "#8da0cb", "#e78ac3", "#a6d854", "#ffd92f", "#e5c494", "#b3b3b3",
    ],
    "dark2": [
        "#1b9e77", "#d95f02", "#7570b3", "#e7298a", "#66a61e", "#e6ab02", "#a6761d", "#666666",
    ],
    "paired": [
        "#a6cee3", "#1f78b4", "#b2df8a", "#33a02c", "#fb9a99", "#e31a1c",
        "#fdbf6f", "#ff7f00", "#cab2d6", "#6a3d9a", "#ffff99", "#b15928",
    ],
    "pastel1": [
        "#fbb4ae", "#b3cde3", "#ccebc5", "#decbe4", "#fed9a6",
        "#ffffcc", "#e5d8bd", "#fddaec", "#f2f2f2",
    ],
    "accent": [
        "#7fc97f", "#beaed4", "#fdc086", "#ffff99", "#386cb0", "#f0027f", "#bf5b17", "#666666",
    ],
}


def get_color_scheme(name: str) -> List[str]:
    """Return the palette for ``name``, falling back to the default scheme."""
    scheme = CATEGORICAL_COLOR_SCHEMES.get(name)
    if scheme is None:
        logger.warning(f"⚠️ Unknown color scheme '{name}', using '{DEFAULT_SCHEME}'")
        scheme = CATEGORICAL_COLOR_SCHEMES[DEFAULT_SCHEME]
    return scheme
