"""Tests for document ordering."""

from __future__ import annotations

from typing import Any

import pytest

from doctable.models import Document, DocumentMetadata, SortOrder, SortState
from doctable.table.sorting import next_sort_state, sort_documents


def make_doc(path: str, name: str = "", size: Any = 0, modified: Any = None) -> Document:
    return Document(
        path=path,
        metadata=DocumentMetadata(name=name or path.strip("/"), size=size, modified=modified),
    )


def paths(documents: list[Document]) -> list[str]:
    return [doc.path for doc in documents]


class TestSortDocuments:
    """Test sort_documents."""

    def test_size_ascending(self) -> None:
        """Should order sizes numerically."""
        docs = [make_doc("/a", size=512), make_doc("/b", size=2048), make_doc("/c", size=1024)]

        result = sort_documents(docs, SortState("size", SortOrder.ASC))

        assert paths(result) == ["/a", "/c", "/b"]

    def test_size_descending(self) -> None:
        docs = [make_doc("/a", size=512), make_doc("/b", size=2048), make_doc("/c", size=1024)]

        result = sort_documents(docs, SortState("size", SortOrder.DESC))

        assert paths(result) == ["/b", "/c", "/a"]

    def test_missing_size_is_zero(self) -> None:
        """None sizes sort like zero."""
        docs = [make_doc("/a", size=10), make_doc("/b", size=None)]

        assert paths(sort_documents(docs, SortState("size"))) == ["/b", "/a"]

    def test_name_is_case_insensitive(self) -> None:
        """Should not put every capitalised name first."""
        docs = [make_doc("/1", name="banana"), make_doc("/2", name="Apple"), make_doc("/3", name="cherry")]

        result = sort_documents(docs, SortState("name"))

        assert [doc.metadata.name for doc in result] == ["Apple", "banana", "cherry"]

    def test_path_is_ordinal(self) -> None:
        """Path compares by code point."""
        docs = [make_doc("/b.md"), make_doc("/B.md"), make_doc("/a.md")]

        assert paths(sort_documents(docs, SortState("path"))) == ["/B.md", "/a.md", "/b.md"]

    def test_modified_dates(self) -> None:
        docs = [
            make_doc("/new", modified="2024-05-01T00:00:00Z"),
            make_doc("/old", modified="2023-01-01T00:00:00Z"),
            make_doc("/mid", modified="2024-01-01T00:00:00Z"),
        ]

        assert paths(sort_documents(docs, SortState("modified"))) == ["/old", "/mid", "/new"]
        assert paths(sort_documents(docs, SortState("modified", "desc"))) == ["/new", "/mid", "/old"]

    def test_invalid_dates_are_oldest(self) -> None:
        """Missing and unparsable dates go first ascending and last descending."""
        docs = [
            make_doc("/missing", modified=None),
            make_doc("/valid", modified="2024-01-01T00:00:00Z"),
            make_doc("/garbage", modified="yesterday-ish"),
        ]

        ascending = sort_documents(docs, SortState("modified", "asc"))
        descending = sort_documents(docs, SortState("modified", "desc"))

        assert paths(ascending) == ["/missing", "/garbage", "/valid"]
        assert paths(descending) == ["/valid", "/missing", "/garbage"]

    def test_ties_keep_input_order_in_both_directions(self) -> None:
        """Sort must be stable ascending and descending."""
        docs = [make_doc("/x", size=1), make_doc("/y", size=1), make_doc("/z", size=0)]

        assert paths(sort_documents(docs, SortState("size", "asc"))) == ["/z", "/x", "/y"]
        assert paths(sort_documents(docs, SortState("size", "desc"))) == ["/x", "/y", "/z"]

    def test_unknown_field_keeps_order(self) -> None:
        docs = [make_doc("/b"), make_doc("/a")]

        assert paths(sort_documents(docs, SortState("color"))) == ["/b", "/a"]

    def test_no_sorting_returns_copy(self) -> None:
        """Should return a new list even when unsorted."""
        docs = [make_doc("/b"), make_doc("/a")]

        result = sort_documents(docs, None)

        assert result == docs
        assert result is not docs


class TestNextSortState:
    """Test the three-state header toggle."""

    def test_cycle(self) -> None:
        """asc -> desc -> unsorted -> asc."""
        state = next_sort_state(None, "name")
        assert state == SortState("name", SortOrder.ASC)

        state = next_sort_state(state, "name")
        assert state == SortState("name", SortOrder.DESC)

        state = next_sort_state(state, "name")
        assert state is None

        assert next_sort_state(state, "name") == SortState("name", SortOrder.ASC)

    @pytest.mark.parametrize("order", [SortOrder.ASC, SortOrder.DESC])
    def test_other_field_restarts_ascending(self, order: SortOrder) -> None:
        assert next_sort_state(SortState("size", order), "name") == SortState("name", SortOrder.ASC)
