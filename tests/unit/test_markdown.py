"""Tests for markdown rendering of the favorites tree."""

from favorites_tree.core.tree.markdown import render_tree_as_markdown
from favorites_tree.models.resource import Resource, ResourceType
from tests.unit.fakes import make


def test_render_whole_tree_in_sibling_order(nested: list[Resource]) -> None:
    md = render_tree_as_markdown(nested)
    assert md == (
        "- **G1**\n"
        "    - X\n"
        "    - **G2**\n"
        "        - Y\n"
        "- F\n"
    )


def test_render_subtree_with_ids(nested: list[Resource]) -> None:
    md = render_tree_as_markdown(nested, root_id="G2", show_ids=True)
    assert md == "- Y `Y`\n"


def test_max_depth_shows_truncation(nested: list[Resource]) -> None:
    md = render_tree_as_markdown(nested, max_depth=1)
    assert md == "- **G1**\n    - ... (2 more children)\n- F\n"


def test_urls_and_directories_are_labelled() -> None:
    url = make("U", type=ResourceType.URL, sort_order=0, name="Python")
    url.url = "https://python.org"
    folder = make("D", type=ResourceType.DIRECTORY, sort_order=1, name="src")
    assert render_tree_as_markdown([url, folder]) == "- [Python](https://python.org)\n- src/\n"


def test_render_empty() -> None:
    assert render_tree_as_markdown([]) == ""
