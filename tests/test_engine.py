"""Tests for the reference parser and the replacement engine.

The engine turns (policy, references, capacity) into a trace with one
step per reference. Each policy only differs in how it picks a victim
once every frame is full.
"""

import pytest

from engine import NEVER, Policy, ReplacementEngine, compare_policies, count_faults, reference_tokens, \
    parse_reference_string, simulate

BELADY = [1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5]
TEXTBOOK = [7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 2, 1, 2, 0, 1, 7, 0, 1]


# -- Reference Parser ---------------------------------------------------------


class TestParseReferenceString:
    """Verify the all-or-nothing reference string parser."""

    def test_commas(self) -> None:
        """Comma separated pages parse in order."""
        assert parse_reference_string("7,0,1,2") == (7, 0, 1, 2)

    def test_mixed_separators(self) -> None:
        """Commas, spaces and newlines may be mixed; empty tokens are dropped."""
        assert parse_reference_string(" 1, 2  3,,4\n5 ") == (1, 2, 3, 4, 5)

    def test_duplicates_kept(self) -> None:
        """Repeated pages stay in the sequence."""
        assert parse_reference_string("1,1,1") == (1, 1, 1)

    def test_bad_token_empties_everything(self) -> None:
        """A single non-numeric token yields an empty sequence, not a partial one."""
        assert parse_reference_string("1,2,x,3") == ()

    def test_decimal_is_rejected(self) -> None:
        """Non-integer numbers are not truncated."""
        assert parse_reference_string("1,2.5,3") == ()

    def test_empty_and_none(self) -> None:
        """Blank input parses to an empty sequence."""
        assert parse_reference_string("") == ()
        assert parse_reference_string("  , ,") == ()
        assert parse_reference_string(None) == ()

    def test_signed_integers(self) -> None:
        """Signs are part of a base-10 integer."""
        assert parse_reference_string("-1,+2") == (-1, 2)

    def test_oversized_integer_empties_everything(self) -> None:
        """A token too long to convert to int gives an empty sequence instead of raising."""
        assert parse_reference_string("1," + "9" * 5000) == ()

    def test_tokens_split_on_any_whitespace(self) -> None:
        """Vertical tab and form feed separate tokens like spaces do."""
        assert reference_tokens("1\x0b2\x0c,3") == ["1", "2", "3"]
        assert reference_tokens("\x0b\x0c") == []


# -- Policy selector ----------------------------------------------------------


class TestPolicy:
    """Verify conversion of selector values to policies."""

    @pytest.mark.parametrize("value", ["Optimal", "optimal", "OPTIMAL", Policy.OPTIMAL])
    def test_parse_optimal(self, value) -> None:
        """Display value, name and member all resolve."""
        assert Policy.parse(value) is Policy.OPTIMAL

    def test_parse_unknown_raises(self) -> None:
        """An unknown selector raises ValueError."""
        with pytest.raises(ValueError):
            Policy.parse("CLOCK")

    def test_every_policy_has_description(self) -> None:
        """Each policy carries a description for display."""
        for policy in Policy:
            assert policy.description


# -- Shared step algorithm ----------------------------------------------------


class TestSharedSteps:
    """Behaviour common to every policy."""

    @pytest.mark.parametrize("policy", list(Policy))
    def test_length_matches_references(self, policy) -> None:
        """There is one step per reference."""
        trace = simulate(policy, TEXTBOOK, 3)
        assert len(trace) == len(TEXTBOOK)
        assert [s.reference for s in trace] == TEXTBOOK

    @pytest.mark.parametrize("policy", list(Policy))
    def test_deterministic(self, policy) -> None:
        """Repeated runs produce identical traces."""
        assert simulate(policy, BELADY, 3) == simulate(policy, BELADY, 3)

    @pytest.mark.parametrize("policy", list(Policy))
    def test_no_duplicate_residents(self, policy) -> None:
        """A page never occupies two frames."""
        for capacity in (1, 2, 3, 4):
            for step in simulate(policy, TEXTBOOK, capacity):
                resident = [p for p in step.frames if p is not None]
                assert len(resident) == len(set(resident))
                assert len(step.frames) == capacity

    @pytest.mark.parametrize("policy", list(Policy))
    def test_fills_lowest_empty_frame(self, policy) -> None:
        """Misses fill empty frames from index 0 upward without evicting."""
        trace = simulate(policy, [5, 6, 5, 7], 4)
        assert trace[0].frames == (5, None, None, None)
        assert trace[1].frames == (5, 6, None, None)
        assert trace[2].is_hit and trace[2].frames == (5, 6, None, None)
        assert trace[3].frames == (5, 6, 7, None)
        assert all(s.replaced is None for s in trace)
        assert trace[1].details == "Page fault! Placed page 6 in empty frame 1."

    @pytest.mark.parametrize("policy", list(Policy))
    def test_hit_leaves_frames_unchanged(self, policy) -> None:
        """A hit copies the previous snapshot and records no eviction."""
        trace = simulate(policy, [1, 2, 1], 2)
        assert trace[2].is_hit
        assert trace[2].frames == trace[1].frames
        assert trace[2].replaced is None
        assert "already resident" in trace[2].details

    @pytest.mark.parametrize("policy", list(Policy))
    def test_degenerate_inputs_give_empty_trace(self, policy) -> None:
        """No references or a capacity below 1 is a no-op."""
        assert simulate(policy, [], 3) == ()
        assert simulate(policy, [1, 2], 0) == ()
        assert simulate(policy, [1, 2], -4) == ()

    def test_eviction_recorded(self) -> None:
        """A full-frame fault names the evicted page and its frame."""
        step = simulate(Policy.FIFO, [1, 2, 3], 2)[2]
        assert not step.is_hit
        assert step.replaced == 1
        assert step.frames == (3, 2)
        assert "page 1 in frame 0" in step.details

    def test_engine_reset_between_runs(self) -> None:
        """Reusing an engine object does not carry state across runs."""
        engine = ReplacementEngine(Policy.LRU, 2)
        first = engine.run([1, 2, 3, 1])
        engine.run([9, 8, 7, 6, 5])
        assert engine.run([1, 2, 3, 1]) == first


# -- FIFO ---------------------------------------------------------------------


class TestFIFO:
    """Verify insertion-order eviction."""

    def test_insertion_order(self) -> None:
        """Pages 1 then 2 are evicted, in the order they were loaded."""
        trace = simulate(Policy.FIFO, [1, 2, 3, 4], 2)
        assert [s.replaced for s in trace] == [None, None, 1, 2]

    def test_hits_do_not_refresh(self) -> None:
        """Referencing page 1 again does not save it from eviction."""
        trace = simulate(Policy.FIFO, [1, 2, 1, 3, 1], 2)
        assert trace[2].is_hit
        assert trace[3].replaced == 1
        assert trace[3].frames == (3, 2)
        assert not trace[4].is_hit
        assert trace[4].replaced == 2

    def test_belady_anomaly(self) -> None:
        """FIFO takes more faults with 4 frames than with 3 on Belady's string."""
        assert count_faults(simulate(Policy.FIFO, BELADY, 3)) == 9
        assert count_faults(simulate(Policy.FIFO, BELADY, 4)) == 10

    def test_textbook_string(self) -> None:
        """The classic 20-reference string gives 15 FIFO faults with 3 frames."""
        assert count_faults(simulate(Policy.FIFO, TEXTBOOK, 3)) == 15


# -- LRU ----------------------------------------------------------------------


class TestLRU:
    """Verify least-recently-used eviction."""

    def test_recency(self) -> None:
        """The fault on page 4 evicts page 3, the least recently referenced."""
        trace = simulate(Policy.LRU, [1, 2, 3, 1, 2, 4], 3)
        assert trace[-1].replaced == 3
        assert trace[-1].frames == (1, 2, 4)

    def test_hits_refresh(self) -> None:
        """Unlike FIFO, a hit protects the page."""
        trace = simulate(Policy.LRU, [1, 2, 1, 3], 2)
        assert trace[3].replaced == 2

    def test_textbook_string(self) -> None:
        """The classic 20-reference string gives 12 LRU faults with 3 frames."""
        assert count_faults(simulate(Policy.LRU, TEXTBOOK, 3)) == 12


# -- Optimal ------------------------------------------------------------------


class TestOptimal:
    """Verify clairvoyant eviction."""

    def test_belady_example(self) -> None:
        """Belady's reference string with 3 frames takes exactly 7 faults."""
        assert count_faults(simulate(Policy.OPTIMAL, BELADY, 3)) == 7

    def test_textbook_string(self) -> None:
        """The classic 20-reference string gives 9 optimal faults with 3 frames."""
        assert count_faults(simulate(Policy.OPTIMAL, TEXTBOOK, 3)) == 9

    def test_furthest_next_use_evicted(self) -> None:
        """Page 1 is needed last, so it is the victim."""
        trace = simulate(Policy.OPTIMAL, [1, 2, 3, 2, 3, 1], 2)
        assert trace[2].replaced == 1
        assert "next used at position 5" in trace[2].details

    def test_never_reused_ties_lowest_frame(self) -> None:
        """Two pages that never recur tie; the lower frame index loses."""
        trace = simulate(Policy.OPTIMAL, [1, 2, 3], 2)
        assert trace[2].replaced == 1
        assert trace[2].frames == (3, 2)
        assert "never used again" in trace[2].details

    def test_never_beats_any_position(self) -> None:
        """A page with no future use outranks one used far in the future."""
        refs = [1, 2, 3] + [4] * 50 + [1]
        trace = simulate(Policy.OPTIMAL, refs, 2)
        assert trace[2].replaced == 2
        assert NEVER > len(refs)


# -- Comparison ---------------------------------------------------------------


class TestComparePolicies:
    """Verify the side-by-side fault counts."""

    def test_all_policies_in_order(self) -> None:
        """Every policy is reported, and Optimal is never worse."""
        faults = compare_policies(TEXTBOOK, 3)
        assert list(faults) == list(Policy)
        assert faults == {Policy.FIFO: 15, Policy.LRU: 12, Policy.OPTIMAL: 9}
        assert faults[Policy.OPTIMAL] <= min(faults.values())
