"""Inspect a document tree JSON file to aid serialization."""

from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path

from adfmd import doc_to_markdown, is_valid_document, list_sections, render_outline, traverse_document


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect document node types, marks, and outline.")
    parser.add_argument("file", help="Local JSON file holding a document (or an API payload field)")
    parser.add_argument("--field", help="Top-level key holding the document, e.g. description or body")
    parser.add_argument("--markdown", action="store_true", help="Also print the rendered Markdown")
    args = parser.parse_args()

    doc = load_document(args.file, field=args.field)
    if not is_valid_document(doc):
        parser.error(f"{args.file} does not contain a version 1 document")

    node_types, mark_types = collect_stats(doc)

    print("Nodes:")
    for name, count in node_types.most_common():
        print(f"{name}: {count}")

    print("\nMarks:")
    for name, count in mark_types.most_common():
        print(f"{name}: {count}")

    print("\nSections:")
    print(render_outline(list_sections(doc["content"])))

    if args.markdown:
        print("\nMarkdown:")
        print(doc_to_markdown(doc))


def load_document(file_path: str, *, field: str | None) -> object:
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"JSON file not found: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    if field:
        return data.get(field) if isinstance(data, dict) else None
    return data


def collect_stats(doc: dict) -> tuple[Counter, Counter]:
    node_types = Counter()
    mark_types = Counter()

    def _visit(node: dict, parent: dict | None, depth: int) -> None:
        node_types[node.get("type")] += 1
        for mark in node.get("marks") or []:
            mark_types[mark.get("type")] += 1

    traverse_document(doc, _visit)
    return node_types, mark_types


if __name__ == "__main__":
    main()
