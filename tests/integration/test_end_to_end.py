"""End-to-end tests rendering the blog example."""

import json
from pathlib import Path

import pytest

from wireshape import from_yaml, render_from_yaml, transform

EXAMPLE_DIR = Path(__file__).parent.parent.parent / "examples" / "blog"
DEFINITIONS = str(EXAMPLE_DIR / "transformers.yaml")


@pytest.fixture
def posts():
    return json.loads((EXAMPLE_DIR / "posts.json").read_text())


@pytest.mark.integration
class TestBlogExample:
    """Render the blog example definitions."""

    def test_validates(self):
        """Test that the example definitions load and validate."""
        catalog = from_yaml(DEFINITIONS, cli_vars={"show_emails": "false"})
        assert catalog.name == "blog"
        assert catalog.names() == ["author", "comment", "post"]

    def test_render_posts(self, posts):
        """Test rendering the full post variant."""
        result = render_from_yaml(DEFINITIONS, "post", posts, cli_vars={"show_emails": "false"})

        assert result == [
            {
                "id": 2,
                "title": "Draft thoughts",
                "meta": {"slug": "draft-thoughts", "words": 40},
                "published": None,
                "status": "Draft",
                "author": {"id": 7, "name": "Ada", "role": "Administrator"},
                "comments": [],
            },
            {
                "id": 1,
                "title": "Hello",
                "meta": {"slug": "hello", "words": 120},
                "published": "2024-03-01T09:30:00",
                "status": "Published",
                "author": {"id": 7, "name": "Ada", "role": "Administrator"},
                "comments": [
                    {
                        "id": 11,
                        "body": "Nice post",
                        "posted": "02 Mar 2024",
                        "author": {"id": 8, "name": "Grace"},
                    }
                ],
            },
        ]

    def test_render_with_emails(self, posts):
        """Test that the email field follows the show_emails variable."""
        result = render_from_yaml(DEFINITIONS, "post", posts, cli_vars={"show_emails": "true"})

        assert result[0]["author"]["email"] == "ada@example.com"
        assert "email" not in result[1]["comments"][0]["author"]

    def test_render_minimal(self, posts):
        """Test rendering the minimal post variant."""
        result = render_from_yaml(
            DEFINITIONS, "post", posts, minimal=True, cli_vars={"show_emails": "false"}
        )
        assert result == [{"id": 2, "title": "Draft thoughts"}, {"id": 1, "title": "Hello"}]

    def test_render_single_post(self, posts):
        """Test rendering one post returns a single mapping."""
        result = render_from_yaml(DEFINITIONS, "post", posts[1], cli_vars={"show_emails": "false"})
        assert result["id"] == 2
        assert result["author"]["name"] == "Ada"

    def test_catalog_transformers_with_transform(self, posts):
        """Test using catalog transformers directly with transform()."""
        catalog = from_yaml(DEFINITIONS, cli_vars={"show_emails": "false"})
        comments = [comment for post in posts for comment in post["comments"]]

        result = transform(comments, catalog.create("comment", minimal=True))

        assert result == [{"id": 11, "body": "Nice post", "posted": "02 Mar 2024", "author": {"id": 8, "name": "Grace"}}]
