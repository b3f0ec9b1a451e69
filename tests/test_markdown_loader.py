"""Tests for markdown note loading."""

from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path

import pytest
import yaml

from doctable.ingestion.markdown_loader import (
    extract_links,
    extract_tags,
    load_document,
    load_preview,
    load_vault,
)
from doctable.models import ModifiedTime

NOTE = """---
title: Weekly review
tags: [work, "#review"]
created: 2024-02-03
---
# Weekly review

Talked about #planning and #work/q1 with [[Alice|the boss]].
See [the doc](projects/plan.md) and [site](https://example.com).
"""


class TestExtractTags:
    """Test tag extraction."""

    def test_frontmatter_then_inline(self) -> None:
        tags = extract_tags({"tags": ["a", "#b"]}, "text #c and #a again")

        assert tags == ["a", "b", "c"]

    def test_single_string_tag(self) -> None:
        assert extract_tags({"tags": "solo"}, "") == ["solo"]

    def test_heading_is_not_a_tag(self) -> None:
        assert extract_tags({}, "# Heading\n## Sub") == []

    def test_anchor_in_word_is_not_a_tag(self) -> None:
        assert extract_tags({}, "page#anchor") == []

    def test_nested_tags(self) -> None:
        assert extract_tags({}, "#project/alpha-1") == ["project/alpha-1"]


class TestExtractLinks:
    """Test link extraction."""

    def test_wikilinks_and_markdown_links(self) -> None:
        body = "[[Note A]] [[Note B|alias]] [text](folder/c.md) [web](http://x.org)"

        assert extract_links(body) == ["Note A", "Note B", "folder/c.md"]

    def test_duplicates_removed(self) -> None:
        assert extract_links("[[A]] and [[A]]") == ["A"]


class TestLoadDocument:
    """Test load_document."""

    def test_load_note(self, tmp_path: Path) -> None:
        note = tmp_path / "journal" / "review.md"
        note.parent.mkdir()
        note.write_text(NOTE, encoding="utf-8")

        doc = load_document(note, tmp_path)

        assert doc.path == "/journal/review.md"
        assert doc.full_path == str(note.resolve())
        assert doc.id == str(note.resolve())
        assert doc.metadata.name == "review"
        assert doc.metadata.size == note.stat().st_size
        assert doc.metadata.modified.kind == ModifiedTime.VALID
        assert doc.metadata.frontmatter["title"] == "Weekly review"
        assert doc.metadata.frontmatter["created"] == date(2024, 2, 3)
        assert doc.metadata.tags == ["work", "review", "planning", "work/q1"]
        assert doc.metadata.links == ["Alice", "projects/plan.md"]

    def test_note_without_frontmatter(self, tmp_path: Path) -> None:
        note = tmp_path / "plain.md"
        note.write_text("Just text #idea", encoding="utf-8")

        doc = load_document(note, tmp_path)

        assert doc.metadata.frontmatter == {}
        assert doc.metadata.tags == ["idea"]

    def test_modified_comes_from_mtime(self, tmp_path: Path) -> None:
        note = tmp_path / "dated.md"
        note.write_text("x", encoding="utf-8")
        os.utime(note, (1704067200, 1704067200))

        doc = load_document(note, tmp_path)

        assert doc.metadata.modified.isoformat() == "2024-01-01T00:00:00.000Z"

    def test_malformed_frontmatter_raises(self, tmp_path: Path) -> None:
        note = tmp_path / "broken.md"
        note.write_text("---\ntitle: [unclosed\n---\nbody", encoding="utf-8")

        with pytest.raises(yaml.YAMLError):
            load_document(note, tmp_path)


class TestLoadVault:
    """Test load_vault."""

    def test_loads_all_notes(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("A", encoding="utf-8")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.md").write_text("B", encoding="utf-8")
        (tmp_path / "c.txt").write_text("C", encoding="utf-8")

        docs = load_vault([tmp_path])

        assert sorted(doc.path for doc in docs) == ["/a.md", "/sub/b.md"]

    def test_single_file_input(self, tmp_path: Path) -> None:
        note = tmp_path / "one.md"
        note.write_text("one", encoding="utf-8")

        docs = load_vault([note])

        assert [doc.path for doc in docs] == ["/one.md"]

    def test_skips_bad_notes(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        (tmp_path / "good.md").write_text("fine", encoding="utf-8")
        (tmp_path / "broken.md").write_text("---\ntitle: [unclosed\n---\n", encoding="utf-8")
        (tmp_path / "binary.md").write_bytes(b"\xff\xfe\x00bad")

        with caplog.at_level(logging.WARNING):
            docs = load_vault([tmp_path])

        assert [doc.path for doc in docs] == ["/good.md"]
        assert "broken.md" in caplog.text
        assert "binary.md" in caplog.text

    def test_empty_vault(self, tmp_path: Path) -> None:
        assert load_vault([tmp_path]) == []


class TestLoadPreview:
    """Test load_preview."""

    def test_strips_frontmatter(self, tmp_path: Path) -> None:
        note = tmp_path / "n.md"
        note.write_text(NOTE, encoding="utf-8")

        preview = load_preview(note, max_chars=500)

        assert preview.startswith("# Weekly review")
        assert "tags:" not in preview

    def test_truncates(self, tmp_path: Path) -> None:
        note = tmp_path / "long.md"
        note.write_text("word " * 100, encoding="utf-8")

        preview = load_preview(note, max_chars=20)

        assert preview.endswith("…")
        assert len(preview) <= 21
