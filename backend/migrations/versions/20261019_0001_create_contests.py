from __future__ import annotations
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "contests",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("admin", sa.String(length=64), nullable=False),
        sa.Column("entry_fee", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_pool", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("participant_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("closed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("entry_fee >= 0", name="ck_contests_entry_fee_nonneg"),
        sa.CheckConstraint("total_pool >= 0", name="ck_contests_pool_nonneg"),
    )

    op.create_table(
        "contest_participants",
        sa.Column("contest_id", sa.String(length=64), sa.ForeignKey("contests.id", ondelete="CASCADE"), primary_key=True, nullable=False),
        sa.Column("identity", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("score", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("entry_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("stake", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("registration_seq", sa.Integer(), nullable=False),
        sa.Column("registered_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_contest_participants_rank", "contest_participants", ["contest_id", "score", "registration_seq"])

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("contest_id", sa.String(length=64), sa.ForeignKey("contests.id", ondelete="CASCADE"), nullable=False),
        sa.Column("identity", sa.String(length=64), nullable=True),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("place", sa.Integer(), nullable=True),
        sa.Column("note", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_ledger_entries_amount_pos"),
        sa.CheckConstraint("type IN ('STAKE', 'PAYOUT', 'RETAINED')", name="ck_ledger_entries_type"),
    )
    op.create_index("ix_ledger_entries_contest_id", "ledger_entries", ["contest_id"])
    op.create_index("ix_ledger_entries_identity", "ledger_entries", ["identity"])
    op.create_unique_constraint("uq_ledger_entries_contest_seq", "ledger_entries", ["contest_id", "seq"])

def downgrade() -> None:
    op.drop_constraint("uq_ledger_entries_contest_seq", "ledger_entries", type_="unique")
    op.drop_index("ix_ledger_entries_identity", table_name="ledger_entries")
    op.drop_index("ix_ledger_entries_contest_id", table_name="ledger_entries")
    op.drop_table("ledger_entries")
    op.drop_index("ix_contest_participants_rank", table_name="contest_participants")
    op.drop_table("contest_participants")
    op.drop_table("contests")
