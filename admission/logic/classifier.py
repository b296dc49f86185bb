"""
Classifier

Tags institutes with a coarse tier:
- IIT, NIT, IIIT by short code or official name
- GFTI for any other named institute
- UNKNOWN when nothing is given
"""

from typing import Optional

from .constants import InstituteCategory, CATEGORY_NAME_PATTERNS


def classify_institute(label: Optional[str]) -> InstituteCategory:
    """
    Classify an institute-type label or institute name.

    Args:
        label: Free text such as "NIT", "IIT Bombay" or
            "National Institute of Technology, Warangal"

    Returns:
        InstituteCategory enum value
    """
    if label is None or not label.strip():
        return InstituteCategory.UNKNOWN

    code = label.strip().upper()
    for category in InstituteCategory:
        if category != InstituteCategory.UNKNOWN and code == category.value:
            return category

    lowered = label.strip().lower()
    for category, long_name, prefix in CATEGORY_NAME_PATTERNS:
        if long_name in lowered or lowered.startswith(prefix):
            return category

    return InstituteCategory.GFTI


def classify_record(institute_type: Optional[str], institute: Optional[str]) -> InstituteCategory:
    """Prefer the stored institute type, fall back to the institute name."""
    if institute_type and institute_type.strip():
        return classify_institute(institute_type)
    return classify_institute(institute)


def matches_category(category: InstituteCategory, requested: Optional[str]) -> bool:
    """True when no category was requested or the tags agree."""
    if not requested or not requested.strip() or requested.strip().upper() == "ALL":
        return True
    return category.value == requested.strip().upper()
