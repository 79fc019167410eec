"""Render the blog example.

Provides two ways of describing the same output:
- transformers.yaml (declarative definitions)
- the Python transformers below
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from wireshape import PRELOAD_RELATED, Transformer, date_format, render_from_yaml, transform

EXAMPLE_DIR = Path(__file__).parent


class AuthorTransformer(Transformer):
    def structure(self):
        return {"id": None, "name": "display_name"}


class CommentTransformer(Transformer):
    order_by = "posted"

    def structure(self):
        return {
            "id": None,
            "body": None,
            "posted": date_format("%d %b %Y", source="created_at"),
            "author": AuthorTransformer(),
        }


class PostTransformer(Transformer):
    preload = {"author": True, "comments": PRELOAD_RELATED}
    order_by = ["id", "desc"]

    def structure(self):
        return {
            "id": None,
            "title": None,
            "excerpt": None,
            "author": AuthorTransformer(),
            "comments": CommentTransformer(),
        }

    def minimal_structure(self):
        return ["id", "title"]

    def get_excerpt(self, post):
        return f"{post['title']} ({post['word_count']} words)"


def main() -> None:
    parser = argparse.ArgumentParser(description="Render the blog example")
    parser.add_argument("--mode", choices=["yaml", "python"], default="yaml")
    parser.add_argument("--minimal", action="store_true")
    args = parser.parse_args()

    posts = json.loads((EXAMPLE_DIR / "posts.json").read_text())
    if args.mode == "yaml":
        result = render_from_yaml(
            str(EXAMPLE_DIR / "transformers.yaml"),
            "post",
            posts,
            minimal=args.minimal,
            cli_vars={"show_emails": "false"},
        )
    else:
        result = transform(posts, PostTransformer(minimal=args.minimal))
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
