"""
Size Filter Tags

Turns product categories and size choices into storefront filter tags.

A category maps to a size template such as "100F" (numeric sizes, women),
"TOPXXXF" (letter sizes, women's tops) or "*M" (one size, men). The
placeholder in the matching template is replaced by each concrete size:

    templates ["100F"], sizes ["36", "38"]  ->  ["36F", "38F"]
    templates ["*F"], any sizes            ->  ["*F"]
"""

import re
from typing import Dict, Iterable, List, Optional

ONE_SIZE_PATTERN = re.compile(r'one size', re.IGNORECASE)
ANY_SIZE_MARKER = re.compile(r'\*[FMМ]')
GENDER_PATTERN = re.compile(r'([FM])$')

CYRILLIC_EM = 'М'


def translate_categories(categories: Iterable[str], category_templates: Dict[str, str]) -> List[str]:
    """
    Map category names to size templates, skipping unknown categories.

    Args:
        categories: Human category names of a product
        category_templates: Category name -> template

    Returns:
        Templates in category order
    """
    return [category_templates[c] for c in categories if c in category_templates]


def generate_sizes(templates: List[str], sizes: List[str], placeholder: str) -> List[str]:
    """
    Substitute each size into the first template containing the placeholder.

    Returns:
        One tag per size, or [] if no template has this placeholder
    """
    template = next((t for t in templates if placeholder in t), None)
    if template is None:
        return []
    return [template.replace(placeholder, size, 1) for size in sizes]


def _gender(templates: List[str]) -> Optional[str]:
    match = GENDER_PATTERN.search(templates[0])
    return match.group(1) if match else None


def generate_tags(
    templates: List[str],
    sizes: List[str],
    number_placeholder: str = "100",
    string_placeholder: str = "XXX",
) -> List[str]:
    """
    Generate size filter tags for a product.

    Exactly one family applies, checked in order:
      1. a "one size" choice or a "*" template -> single "*<gender>" tag
      2. numeric sizes -> numeric template per size
      3. letter sizes -> letter template per size

    Args:
        templates: Size templates from translate_categories (non-empty)
        sizes: Raw size choices
        number_placeholder: Placeholder in numeric-size templates
        string_placeholder: Placeholder in letter-size templates

    Returns:
        Tags, or [] when nothing matched (the product is then unclassifiable)
    """
    if not templates:
        return []

    gender = _gender(templates)
    if gender is None:
        return []

    sizes = [size.replace(CYRILLIC_EM, 'M') for size in sizes]
    sizes_string = ' '.join(sizes)

    if ONE_SIZE_PATTERN.search(sizes_string) or ANY_SIZE_MARKER.search(' '.join(templates)):
        return [f'*{gender}']
    if re.search(r'\d', sizes_string, re.ASCII):
        return generate_sizes(templates, sizes, number_placeholder)
    if re.search(r'\w', sizes_string, re.ASCII):
        return generate_sizes(templates, sizes, string_placeholder)
    return []
