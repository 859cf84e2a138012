import re
from typing import List, Mapping, Union


def array_of_other_pages(total_pages: int) -> List[int]:
    """Page numbers 2..total_pages, i.e. every page but the first."""
    return list(range(2, total_pages + 1))


def replace_all(text: str, replacements: Mapping[str, Union[str, int]]) -> str:
    """
    Replaces every occurrence of each key in ``replacements`` in a single pass.

    Matching is case-sensitive and keys are treated literally, so a
    replacement value is never itself searched for other keys.
    """
    if not replacements:
        return text
    pattern = re.compile("|".join(re.escape(key) for key in replacements))
    return pattern.sub(lambda match: str(replacements[match.group(0)]), text)
