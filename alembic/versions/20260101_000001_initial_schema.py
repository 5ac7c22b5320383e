"""Initial schema

Revision ID: 20260101_000001
Revises:
Create Date: 2026-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20260101_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.DECIMAL(precision=18, scale=8)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('country', sa.String(length=100), nullable=True),
        sa.Column('referral_code', sa.String(length=20), nullable=False),
        sa.Column('invite_code', sa.String(length=20), nullable=True),
        sa.Column('wallet_address', sa.String(length=255), nullable=True),
        sa.Column('wallet_network', sa.String(length=50), nullable=True),
        sa.Column('balance', MONEY, nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('completed_tasks', sa.Integer(), nullable=False),
        sa.Column('referred_by_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            'completed_tasks >= 0',
            name=op.f('ck_users_check_user_completed_tasks_non_negative'),
        ),
        sa.CheckConstraint(
            'level >= 1', name=op.f('ck_users_check_user_level_positive')
        ),
        sa.ForeignKeyConstraint(
            ['referred_by_id'], ['users.id'],
            name=op.f('fk_users_referred_by_id_users'),
            ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
    )
    op.create_index(
        op.f('ix_users_username'), 'users', ['username'], unique=True
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(
        op.f('ix_users_referral_code'), 'users', ['referral_code'],
        unique=True
    )
    op.create_index(
        op.f('ix_users_referred_by_id'), 'users', ['referred_by_id'],
        unique=False
    )

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('price', MONEY, nullable=False),
        sa.Column('negative_amount', MONEY, nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_products')),
    )
    op.create_index(
        'idx_products_active_end_date', 'products',
        ['is_active', 'end_date'], unique=False
    )

    op.create_table(
        'user_task_overrides',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('negative_amount', MONEY, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.id'],
            name=op.f('fk_user_task_overrides_product_id_products'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_user_task_overrides_user_id_users'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_user_task_overrides')),
        sa.UniqueConstraint(
            'user_id', 'product_id', name='uq_user_task_override_user_product'
        ),
    )
    op.create_index(
        op.f('ix_user_task_overrides_user_id'), 'user_task_overrides',
        ['user_id'], unique=False
    )
    op.create_index(
        op.f('ix_user_task_overrides_product_id'), 'user_task_overrides',
        ['product_id'], unique=False
    )

    op.create_table(
        'task_submissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('profit_earned', MONEY, nullable=False),
        sa.Column('amount_debited', MONEY, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.id'],
            name=op.f('fk_task_submissions_product_id_products'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_task_submissions_user_id_users'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_task_submissions')),
        # One submission per (user, product); concurrent duplicates fail here
        sa.UniqueConstraint(
            'user_id', 'product_id', name='uq_task_submission_user_product'
        ),
    )
    op.create_index(
        op.f('ix_task_submissions_user_id'), 'task_submissions',
        ['user_id'], unique=False
    )
    op.create_index(
        op.f('ix_task_submissions_product_id'), 'task_submissions',
        ['product_id'], unique=False
    )
    op.create_index(
        'idx_task_submissions_user_created', 'task_submissions',
        ['user_id', 'created_at'], unique=False
    )

    op.create_table(
        'referral_bonuses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('referrer_id', sa.Integer(), nullable=False),
        sa.Column('referred_user_id', sa.Integer(), nullable=False),
        sa.Column('task_submission_id', sa.Integer(), nullable=False),
        sa.Column('bonus_amount', MONEY, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['referred_user_id'], ['users.id'],
            name=op.f('fk_referral_bonuses_referred_user_id_users'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['referrer_id'], ['users.id'],
            name=op.f('fk_referral_bonuses_referrer_id_users'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['task_submission_id'], ['task_submissions.id'],
            name=op.f('fk_referral_bonuses_task_submission_id_task_submissions'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_referral_bonuses')),
    )
    op.create_index(
        op.f('ix_referral_bonuses_referrer_id'), 'referral_bonuses',
        ['referrer_id'], unique=False
    )
    op.create_index(
        op.f('ix_referral_bonuses_referred_user_id'), 'referral_bonuses',
        ['referred_user_id'], unique=False
    )
    op.create_index(
        op.f('ix_referral_bonuses_task_submission_id'), 'referral_bonuses',
        ['task_submission_id'], unique=False
    )

    for table, check_name in (
        ('deposits', 'check_deposit_amount_positive'),
        ('withdrawals', 'check_withdrawal_amount_positive'),
    ):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('network', sa.String(length=50), nullable=False),
            sa.Column('wallet_address', sa.String(length=255), nullable=False),
            sa.Column('amount', MONEY, nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column(
                'created_at', sa.DateTime(timezone=True), nullable=False
            ),
            sa.Column(
                'processed_at', sa.DateTime(timezone=True), nullable=True
            ),
            sa.CheckConstraint(
                'amount > 0', name=op.f(f'ck_{table}_{check_name}')
            ),
            sa.ForeignKeyConstraint(
                ['user_id'], ['users.id'],
                name=op.f(f'fk_{table}_user_id_users'),
                ondelete='CASCADE',
            ),
            sa.PrimaryKeyConstraint('id', name=op.f(f'pk_{table}')),
        )
        op.create_index(
            op.f(f'ix_{table}_user_id'), table, ['user_id'], unique=False
        )
    op.create_index(
        'idx_deposit_status', 'deposits', ['status'], unique=False
    )
    op.create_index(
        'idx_withdrawal_status', 'withdrawals', ['status'], unique=False
    )

    op.create_table(
        'admin_actions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('admin_id', sa.Integer(), nullable=True),
        sa.Column('action_type', sa.String(length=50), nullable=False),
        sa.Column('target_user_id', sa.Integer(), nullable=True),
        sa.Column(
            'details',
            sa.JSON().with_variant(
                postgresql.JSONB(astext_type=sa.Text()), 'postgresql'
            ),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['target_user_id'], ['users.id'],
            name=op.f('fk_admin_actions_target_user_id_users'),
            ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_admin_actions')),
    )
    op.create_index(
        op.f('ix_admin_actions_action_type'), 'admin_actions',
        ['action_type'], unique=False
    )
    op.create_index(
        'idx_admin_actions_target', 'admin_actions',
        ['target_user_id', 'created_at'], unique=False
    )


def downgrade() -> None:
    op.drop_index('idx_admin_actions_target', table_name='admin_actions')
    op.drop_index(
        op.f('ix_admin_actions_action_type'), table_name='admin_actions'
    )
    op.drop_table('admin_actions')

    op.drop_index('idx_withdrawal_status', table_name='withdrawals')
    op.drop_index('idx_deposit_status', table_name='deposits')
    for table in ('withdrawals', 'deposits'):
        op.drop_index(op.f(f'ix_{table}_user_id'), table_name=table)
        op.drop_table(table)

    op.drop_table('referral_bonuses')
    op.drop_index(
        'idx_task_submissions_user_created', table_name='task_submissions'
    )
    op.drop_table('task_submissions')
    op.drop_table('user_task_overrides')
    op.drop_index('idx_products_active_end_date', table_name='products')
    op.drop_table('products')
    op.drop_table('users')
