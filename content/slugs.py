"""
URL slug normalization.
"""
from django.utils.text import slugify


def normalize_slug(value):
    """
    Normalize a page slug: each '/'-separated segment is slugified, empty
    segments are dropped, and leading/trailing slashes disappear.

    "/About Us/" -> "about-us", "services/Web Design" -> "services/web-design".
    Returns '' when nothing usable is left.
    """
    if value is None:
        return ''
    segments = (slugify(segment) for segment in str(value).strip().split('/'))
    return '/'.join(segment for segment in segments if segment)
