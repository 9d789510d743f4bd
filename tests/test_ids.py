"""Tests for non-fungible local ids and set matching."""

import pytest

from ledger_testenv import IdentifierSet, InvalidIdentifier, NonFungibleLocalId, ids, nft_id


class TestNftId:

    @pytest.mark.parametrize("literal", [7, "7", "#7#", " #7# "])
    def test_integer_forms_normalise_to_the_same_id(self, literal):
        assert nft_id(literal) == NonFungibleLocalId("integer", 7)

    def test_string_forms(self):
        assert nft_id("<alpha>") == nft_id("alpha")
        assert str(nft_id("alpha")) == "<alpha>"

    def test_bytes_forms(self):
        assert nft_id(b"\xc0\xff\xee") == nft_id("[c0ffee]")
        assert str(nft_id(b"\xc0\xff\xee")) == "[c0ffee]"

    def test_kinds_do_not_collide(self):
        assert nft_id(7) != nft_id("<7>")

    @pytest.mark.parametrize("literal", [True, -1, "", b"", 1.5])
    def test_invalid_literals_are_rejected(self, literal):
        with pytest.raises(InvalidIdentifier):
            nft_id(literal)

    def test_invalid_identifier_is_a_value_error(self):
        with pytest.raises(ValueError):
            nft_id(-3)


class TestIds:

    def test_duplicates_collapse_and_order_is_ignored(self):
        assert ids([7, 7, 3]) == ids([3, 7])

    def test_different_members_are_not_equal(self):
        assert ids([3, 7]) != ids([3, 7, 9])

    def test_mixed_literal_forms(self):
        assert ids([1, "#2#", "3"]) == ids(["#3#", 2, 1])

    def test_empty(self):
        assert ids() == ids([])
        assert len(ids()) == 0

    def test_single_literal_is_wrapped(self):
        assert ids(5) == ids([5])
        assert ids("alpha") == ids(["<alpha>"])

    def test_iteration_keeps_first_seen_order(self):
        assert [str(i) for i in ids([9, 2, 9, 4])] == ["#9#", "#2#", "#4#"]

    def test_sorted(self):
        assert ids([9, 2, 4]).sorted() == (nft_id(2), nft_id(4), nft_id(9))

    def test_membership_accepts_literals(self):
        collection = ids([1, 2])
        assert 1 in collection
        assert "#2#" in collection
        assert 3 not in collection
        assert -1 not in collection

    @pytest.mark.parametrize("literal", ["²", "#²#", "١٢"])
    def test_non_ascii_digits_are_string_ids(self, literal):
        assert nft_id(literal).kind == "string"
        assert literal not in ids([1, 2])

    def test_compares_with_builtin_sets(self):
        assert ids([1, 2]) == {nft_id(1), nft_id(2)}
        assert ids([1, 2]) == frozenset([nft_id(2), nft_id(1)])

    def test_set_operations_return_identifier_sets(self):
        union = ids([1, 2]) | ids([2, 3])
        assert isinstance(union, IdentifierSet)
        assert union == ids([1, 2, 3])
        assert ids([1, 2, 3]) - ids([2]) == ids([1, 3])
        assert ids([1, 2]) <= ids([1, 2, 3])

    def test_hashable(self):
        assert hash(ids([1, 2])) == hash(ids([2, 1]))
        assert len({ids([1, 2]), ids([2, 1])}) == 1

    def test_repr(self):
        assert repr(ids([3, 1])) == "ids([#3#, #1#])"
