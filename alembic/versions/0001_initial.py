"""Initial migration

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    # Create profiles table
    op.create_table('profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=True),
        sa.Column('mpesa_phone', sa.String(length=16), nullable=True),
        sa.Column('avatar_url', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE')
    )

    # Create wallets table
    op.create_table('wallets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('balance', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('total_earned', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('total_staked', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('total_lost', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint('balance >= 0', name='chk_balance_nonneg'),
        sa.CheckConstraint('total_earned >= 0', name='chk_earned_nonneg'),
        sa.CheckConstraint('total_staked >= 0', name='chk_staked_nonneg'),
        sa.CheckConstraint('total_lost >= 0', name='chk_lost_nonneg')
    )

    # Create habits table
    op.create_table('habits',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('stake_amount', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('current_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('best_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint('stake_amount >= 0', name='chk_stake_nonneg'),
        sa.CheckConstraint('duration_days > 0', name='chk_duration_positive'),
        sa.CheckConstraint('current_streak >= 0', name='chk_streak_nonneg'),
        sa.CheckConstraint('best_streak >= current_streak', name='chk_best_streak')
    )
    op.create_index('ix_habits_user_id', 'habits', ['user_id'])

    # Create habit_logs table
    op.create_table('habit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('habit_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('completed_on', sa.Date(), nullable=False),
        sa.Column('completed_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['habit_id'], ['habits.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('habit_id', 'completed_on', name='uq_habit_log_day')
    )
    op.create_index('ix_habit_logs_user_id', 'habit_logs', ['user_id'])

    # Create transactions table
    op.create_table('transactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('habit_id', sa.Uuid(), nullable=True),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='completed'),
        sa.Column('reference', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['habit_id'], ['habits.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('reference')
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index(
        'ix_transactions_pending_deposits', 'transactions', ['created_at'],
        postgresql_where=sa.text("status = 'pending'")
    )

    # Create sponsored_habits table
    op.create_table('sponsored_habits',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('brand_name', sa.String(length=128), nullable=False),
        sa.Column('brand_logo', sa.String(length=512), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('reward_amount', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('participants_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rating', sa.Numeric(precision=3, scale=2), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('sponsored_habits')
    op.drop_index('ix_transactions_pending_deposits', table_name='transactions')
    op.drop_index('ix_transactions_user_id', table_name='transactions')
    op.drop_table('transactions')
    op.drop_index('ix_habit_logs_user_id', table_name='habit_logs')
    op.drop_table('habit_logs')
    op.drop_index('ix_habits_user_id', table_name='habits')
    op.drop_table('habits')
    op.drop_table('wallets')
    op.drop_table('profiles')
    op.drop_table('users')
