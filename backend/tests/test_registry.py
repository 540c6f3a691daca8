"""Participant registry: register, update_score, lookup, leaderboard."""
import pytest

from quizpool.errors import (
    AlreadyRegistered, ContestNotActive, InsufficientPayment, InvalidAmount, NotRegistered, Unauthorized,
)
from quizpool.models.contest import MAX_AMOUNT
from quizpool.services.contest import initialize, read_state
from quizpool.services.ledger import ledger_entries
from quizpool.services.payout import close_and_distribute
from quizpool.services.registry import register, update_score, lookup, leaderboard
from conftest import ADMIN

CID = "quiz-1"
ALICE, BOB, CAROL, DAVE = "GALICE", "GBOB", "GCAROL", "GDAVE"


@pytest.fixture
async def contest(session):
    await initialize(session, CID, ADMIN, 10)
    return CID


# ============================================================================
# register
# ============================================================================


class TestRegister:
    @pytest.mark.asyncio
    async def test_success_updates_pool_and_record(self, session, contest):
        assert await register(session, contest, ALICE, ALICE, 10) is True
        state = await read_state(session, contest)
        assert state.total_pool == 10
        assert state.participant_count == 1

        rec = await lookup(session, contest, ALICE)
        assert rec.entry_paid is True
        assert rec.score == 0
        assert rec.stake == 10
        assert rec.registration_seq == 1

    @pytest.mark.asyncio
    async def test_pool_is_sum_of_payments(self, session, contest):
        payments = {ALICE: 10, BOB: 15, CAROL: 10, DAVE: 42}
        for who, amount in payments.items():
            await register(session, contest, who, who, amount)
        state = await read_state(session, contest)
        assert state.total_pool == sum(payments.values())
        assert state.participant_count == 4

    @pytest.mark.asyncio
    async def test_overpayment_enters_pool_in_full(self, session, contest):
        await register(session, contest, ALICE, ALICE, 25)
        assert (await read_state(session, contest)).total_pool == 25

    @pytest.mark.asyncio
    async def test_fee_floor(self, session, contest):
        with pytest.raises(InsufficientPayment) as exc:
            await register(session, contest, ALICE, ALICE, 9)
        assert exc.value.entry_fee == 10
        assert exc.value.payment_amount == 9
        assert await register(session, contest, ALICE, ALICE, 10) is True

    @pytest.mark.asyncio
    async def test_negative_payment_rejected(self, session, contest):
        with pytest.raises(InsufficientPayment):
            await register(session, contest, ALICE, ALICE, -10)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("second_payment", [10, 11, 1000])
    async def test_double_registration_rejected(self, session, contest, second_payment):
        await register(session, contest, ALICE, ALICE, 10)
        with pytest.raises(AlreadyRegistered):
            await register(session, contest, ALICE, ALICE, second_payment)
        state = await read_state(session, contest)
        assert state.total_pool == 10
        assert state.participant_count == 1

    @pytest.mark.asyncio
    async def test_caller_must_be_identity(self, session, contest):
        with pytest.raises(Unauthorized):
            await register(session, contest, BOB, ALICE, 10)
        assert (await lookup(session, contest, ALICE)).entry_paid is False
        assert (await read_state(session, contest)).total_pool == 0

    @pytest.mark.asyncio
    async def test_uninitialized_contest_not_active(self, session):
        with pytest.raises(ContestNotActive):
            await register(session, "nope", ALICE, ALICE, 10)

    @pytest.mark.asyncio
    async def test_closed_contest_not_active(self, session, contest):
        await register(session, contest, ALICE, ALICE, 10)
        await close_and_distribute(session, contest, ADMIN, [ALICE])
        with pytest.raises(ContestNotActive):
            await register(session, contest, BOB, BOB, 10)
        assert (await lookup(session, contest, BOB)).entry_paid is False

    @pytest.mark.asyncio
    async def test_check_order(self, session, contest):
        """Authorization beats activity, activity beats fee, fee beats duplicate."""
        await register(session, contest, ALICE, ALICE, 10)
        with pytest.raises(Unauthorized):
            await register(session, "nope", BOB, ALICE, 1)
        with pytest.raises(ContestNotActive):
            await register(session, "nope", ALICE, ALICE, 1)
        with pytest.raises(InsufficientPayment):
            await register(session, contest, ALICE, ALICE, 1)

    @pytest.mark.asyncio
    async def test_stake_recorded_in_ledger(self, session, contest):
        await register(session, contest, ALICE, ALICE, 10)
        await register(session, contest, BOB, BOB, 12)
        entries = await ledger_entries(session, contest)
        assert [(e.seq, e.type, e.identity, e.amount) for e in entries] == [
            (1, "STAKE", ALICE, 10),
            (2, "STAKE", BOB, 12),
        ]

    @pytest.mark.asyncio
    async def test_payment_beyond_storable_range(self, session, contest):
        with pytest.raises(InvalidAmount):
            await register(session, contest, ALICE, ALICE, 2**63)
        assert (await lookup(session, contest, ALICE)).entry_paid is False
        assert (await read_state(session, contest)).total_pool == 0

    @pytest.mark.asyncio
    async def test_pool_cannot_grow_past_storable_range(self, session, contest):
        await register(session, contest, ALICE, ALICE, 2**62)
        await register(session, contest, BOB, BOB, 2**62 - 1)
        assert (await read_state(session, contest)).total_pool == MAX_AMOUNT

        with pytest.raises(InvalidAmount):
            await register(session, contest, CAROL, CAROL, 10)
        state = await read_state(session, contest)
        assert state.total_pool == MAX_AMOUNT
        assert state.participant_count == 2
        assert (await lookup(session, contest, CAROL)).entry_paid is False
        assert len(await ledger_entries(session, contest)) == 2

    @pytest.mark.asyncio
    async def test_zero_payment_on_free_contest(self, session):
        await initialize(session, "free", ADMIN, 0)
        assert await register(session, "free", ALICE, ALICE, 0) is True
        state = await read_state(session, "free")
        assert state.total_pool == 0
        assert state.participant_count == 1
        # nothing moved, nothing recorded
        assert await ledger_entries(session, "free") == []


# ============================================================================
# update_score
# ============================================================================


class TestUpdateScore:
    @pytest.mark.asyncio
    async def test_admin_overwrites_score(self, session, contest):
        await register(session, contest, ALICE, ALICE, 10)
        rec = await update_score(session, contest, ADMIN, ALICE, 7)
        assert rec.score == 7
        # not monotonic: lower scores are accepted too
        await update_score(session, contest, ADMIN, ALICE, 3)
        assert (await lookup(session, contest, ALICE)).score == 3

    @pytest.mark.asyncio
    async def test_pool_untouched(self, session, contest):
        await register(session, contest, ALICE, ALICE, 10)
        await update_score(session, contest, ADMIN, ALICE, 100)
        state = await read_state(session, contest)
        assert state.total_pool == 10
        assert state.participant_count == 1

    @pytest.mark.asyncio
    async def test_unregistered_identity(self, session, contest):
        with pytest.raises(NotRegistered):
            await update_score(session, contest, ADMIN, BOB, 5)
        assert (await lookup(session, contest, BOB)).entry_paid is False

    @pytest.mark.asyncio
    async def test_only_admin(self, session, contest):
        await register(session, contest, ALICE, ALICE, 10)
        with pytest.raises(Unauthorized):
            await update_score(session, contest, ALICE, ALICE, 999)
        assert (await lookup(session, contest, ALICE)).score == 0

    @pytest.mark.asyncio
    async def test_score_beyond_storable_range(self, session, contest):
        await register(session, contest, ALICE, ALICE, 10)
        with pytest.raises(InvalidAmount):
            await update_score(session, contest, ADMIN, ALICE, 2**63)
        assert (await lookup(session, contest, ALICE)).score == 0

    @pytest.mark.asyncio
    async def test_closed_contest(self, session, contest):
        await register(session, contest, ALICE, ALICE, 10)
        await close_and_distribute(session, contest, ADMIN, [ALICE])
        with pytest.raises(ContestNotActive):
            await update_score(session, contest, ADMIN, ALICE, 1)


# ============================================================================
# lookup / leaderboard
# ============================================================================


class TestReads:
    @pytest.mark.asyncio
    async def test_lookup_miss_is_default(self, session, contest):
        rec = await lookup(session, contest, "GNOBODY")
        assert rec.identity == "GNOBODY"
        assert rec.entry_paid is False
        assert rec.score == 0
        assert rec.stake == 0
        assert rec.registration_seq is None

    @pytest.mark.asyncio
    async def test_lookup_on_unknown_contest(self, session):
        rec = await lookup(session, "nope", ALICE)
        assert rec.entry_paid is False
        assert rec.score == 0

    @pytest.mark.asyncio
    async def test_leaderboard_order_and_tie_break(self, session, contest):
        for who in (ALICE, BOB, CAROL, DAVE):
            await register(session, contest, who, who, 10)
        await update_score(session, contest, ADMIN, ALICE, 5)
        await update_score(session, contest, ADMIN, BOB, 9)
        await update_score(session, contest, ADMIN, CAROL, 9)
        await update_score(session, contest, ADMIN, DAVE, 1)

        board = await leaderboard(session, contest)
        assert [r.identity for r in board] == [BOB, CAROL, ALICE, DAVE]
        top = await leaderboard(session, contest, limit=2)
        assert [r.identity for r in top] == [BOB, CAROL]

    @pytest.mark.asyncio
    async def test_leaderboard_empty(self, session, contest):
        assert await leaderboard(session, contest) == []
