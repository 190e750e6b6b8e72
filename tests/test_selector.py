"""Tests for retention selection."""

import pytest
from conftest import make_versioned

from tf_module_publisher.core.exceptions import ConfigurationError
from tf_module_publisher.retention.selector import select_versions_to_delete, sort_newest_first


def _versions(objects) -> list[str]:
    return [obj.version for obj in objects]


class TestSortNewestFirst:
    """Tests for semantic version ordering."""

    def test_numeric_components_compare_numerically(self) -> None:
        ordered = sort_newest_first(
            [make_versioned(v) for v in ["1.9.0", "1.10.0", "1.2.0", "10.0.0", "2.0.0"]]
        )
        assert _versions(ordered) == ["10.0.0", "2.0.0", "1.10.0", "1.9.0", "1.2.0"]

    def test_prerelease_ranks_below_release(self) -> None:
        ordered = sort_newest_first(
            [make_versioned(v) for v in ["2.0.0-rc.1", "2.0.0", "1.9.9", "2.0.0-alpha"]]
        )
        assert _versions(ordered) == ["2.0.0", "2.0.0-rc.1", "2.0.0-alpha", "1.9.9"]

    def test_equal_precedence_keeps_input_order(self) -> None:
        """Build metadata does not affect precedence; ties stay in listing order."""
        ordered = sort_newest_first(
            [make_versioned(v) for v in ["1.0.0+b", "1.1.0", "1.0.0+a", "1.0.0"]]
        )
        assert _versions(ordered) == ["1.1.0", "1.0.0+b", "1.0.0+a", "1.0.0"]

    def test_empty(self) -> None:
        assert sort_newest_first([]) == []


class TestSelectVersionsToDelete:
    """Tests for select_versions_to_delete."""

    def test_deletes_oldest_beyond_keep_count(self) -> None:
        candidates = [make_versioned(v) for v in ["1.0.0", "1.1.0", "1.2.0", "1.3.0", "1.4.0"]]
        decision = select_versions_to_delete(candidates, "2.0.0", keep_versions=3)

        assert _versions(decision.kept) == ["1.4.0", "1.3.0", "1.2.0"]
        assert _versions(decision.to_delete) == ["1.1.0", "1.0.0"]
        assert decision.candidate_count == 5
        assert not decision.nothing_to_delete

    def test_current_version_never_deleted(self) -> None:
        """The current version is excluded even when it is the oldest stored."""
        candidates = [make_versioned(v) for v in ["0.1.0", "3.0.0", "2.0.0", "1.0.0"]]
        decision = select_versions_to_delete(candidates, "0.1.0", keep_versions=1)

        assert "0.1.0" not in _versions(decision.to_delete)
        assert "0.1.0" not in _versions(decision.kept)
        assert _versions(decision.kept) == ["3.0.0"]
        assert _versions(decision.to_delete) == ["2.0.0", "1.0.0"]

    def test_current_version_does_not_count_towards_keep(self) -> None:
        candidates = [make_versioned(v) for v in ["1.0.0", "1.1.0", "1.2.0"]]
        decision = select_versions_to_delete(candidates, "1.2.0", keep_versions=2)

        assert _versions(decision.kept) == ["1.1.0", "1.0.0"]
        assert decision.nothing_to_delete

    def test_current_version_matched_by_exact_string(self) -> None:
        """A stored version equal in precedence but spelled differently is a prior version."""
        candidates = [make_versioned(v) for v in ["1.0.0+build.1", "0.9.0"]]
        decision = select_versions_to_delete(candidates, "1.0.0", keep_versions=1)

        assert _versions(decision.kept) == ["1.0.0+build.1"]
        assert _versions(decision.to_delete) == ["0.9.0"]

    def test_fewer_candidates_than_keep_count(self) -> None:
        candidates = [make_versioned(v) for v in ["1.0.0", "1.1.0"]]
        decision = select_versions_to_delete(candidates, "1.2.0", keep_versions=5)

        assert decision.to_delete == []
        assert decision.nothing_to_delete
        assert decision.summary() == "No old versions to clean up (keeping 5, found 2)"

    def test_exactly_keep_count_candidates(self) -> None:
        candidates = [make_versioned(v) for v in ["1.0.0", "1.1.0", "1.2.0"]]
        decision = select_versions_to_delete(candidates, "2.0.0", keep_versions=3)
        assert decision.nothing_to_delete

    def test_no_candidates(self) -> None:
        decision = select_versions_to_delete([], "1.0.0", keep_versions=5)
        assert decision.kept == []
        assert decision.to_delete == []
        assert decision.candidate_count == 0

    def test_deletion_count(self) -> None:
        """Exactly max(0, prior - keep) versions are selected."""
        versions = [f"1.{minor}.0" for minor in range(10)]
        candidates = [make_versioned(v) for v in versions]
        for keep in range(1, 12):
            decision = select_versions_to_delete(candidates, "2.0.0", keep_versions=keep)
            assert len(decision.to_delete) == max(0, len(versions) - keep)
            assert len(decision.kept) + len(decision.to_delete) == len(versions)

    def test_every_kept_version_is_newer_than_every_deleted(self) -> None:
        candidates = [
            make_versioned(v)
            for v in ["1.0.0-beta", "0.5.0", "1.0.0", "2.1.0", "1.10.0", "1.9.0", "2.0.0-rc.1"]
        ]
        decision = select_versions_to_delete(candidates, "3.0.0", keep_versions=3)

        oldest_kept = min(obj.version_info for obj in decision.kept)
        for obj in decision.to_delete:
            assert obj.version_info <= oldest_kept

    def test_selection_is_deterministic(self) -> None:
        candidates = [make_versioned(v) for v in ["1.0.0+a", "1.0.0+b", "0.9.0", "1.0.0+c"]]
        first = select_versions_to_delete(candidates, "2.0.0", keep_versions=2)
        second = select_versions_to_delete(list(candidates), "2.0.0", keep_versions=2)

        assert _versions(first.kept) == _versions(second.kept) == ["1.0.0+a", "1.0.0+b"]
        assert _versions(first.to_delete) == ["1.0.0+c", "0.9.0"]

    def test_summary_when_deleting(self) -> None:
        candidates = [make_versioned(v) for v in ["1.0.0", "1.1.0"]]
        decision = select_versions_to_delete(candidates, "2.0.0", keep_versions=1)
        assert decision.summary().startswith("Cleaning up 1 old version(s)")

    @pytest.mark.parametrize("keep", [0, -1, True])
    def test_invalid_keep_count(self, keep) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            select_versions_to_delete([make_versioned("1.0.0")], "2.0.0", keep_versions=keep)
        assert exc_info.value.field == "keep_versions"
        assert exc_info.value.exit_code == 2
