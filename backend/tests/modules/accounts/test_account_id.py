import pytest

from modules.accounts.account_id import (
    ACCOUNT_ID_PATTERN,
    MAX_ACCOUNT_ID_ATTEMPTS,
    allocate_account_id,
    generate_account_id,
)
from modules.accounts.exceptions import AccountIdExhaustedError


class TestGenerateAccountId:
    def test_format(self):
        """Generated IDs should be PM- plus 10 uppercase hex digits."""
        for _ in range(50):
            assert ACCOUNT_ID_PATTERN.match(generate_account_id())

    def test_sequential_ids_differ(self):
        assert generate_account_id() != generate_account_id()


class TestAllocateAccountId:
    def test_first_candidate_claimed(self):
        claimed = allocate_account_id(lambda candidate: {"account_id": candidate})
        assert ACCOUNT_ID_PATTERN.match(claimed["account_id"])

    def test_retries_after_collision(self):
        """Colliding candidates should be skipped, never reused."""
        candidates = iter(["PM-0000000001", "PM-0000000002", "PM-0000000003"])
        taken = {"PM-0000000001", "PM-0000000002"}
        attempts = []

        def claim(candidate):
            attempts.append(candidate)
            return None if candidate in taken else candidate

        result = allocate_account_id(claim, generate=lambda: next(candidates))

        assert result == "PM-0000000003"
        assert attempts == ["PM-0000000001", "PM-0000000002", "PM-0000000003"]

    def test_gives_up_after_five_attempts(self):
        calls = []

        def claim(candidate):
            calls.append(candidate)
            return None

        with pytest.raises(AccountIdExhaustedError) as exc_info:
            allocate_account_id(claim, generate=lambda: "PM-AAAAAAAAAA")

        assert len(calls) == MAX_ACCOUNT_ID_ATTEMPTS == 5
        assert exc_info.value.details["attempts"] == 5
