from typing import Dict, Optional

from litero.utils.helpers import replace_all

TEMPLATE_PLACEHOLDERS = (
    "%title%", "%posttitle%", "%author%", "%authorurl%", "%content%", "%postcontent%", "%storyurl%",
)


def template_values(
    title: str,
    post_title: str,
    author: str,
    author_url: str,
    content: str,
    story_url: str,
) -> Dict[str, str]:
    return {
        "%title%": title,
        "%posttitle%": post_title,
        "%author%": author,
        "%authorurl%": author_url,
        "%content%": content,
        "%postcontent%": post_title,
        "%storyurl%": story_url,
    }


def fill_template(template: Optional[str], values: Dict[str, str]) -> str:
    """Substitutes every placeholder; without a template the content stands alone."""
    if not template:
        return values.get("%content%", "")
    return replace_all(template, values)
