"""create_sms_compliance_tables

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-18 09:12:44.201873

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b901'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'phone_opt_status',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('phone_number', sa.String(length=32), nullable=False),
        sa.Column('opted_out', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('opt_out_timestamp', sa.DateTime(), nullable=True),
        sa.Column('opt_out_keyword', sa.String(length=50), nullable=True),
        sa.Column('opt_in_timestamp', sa.DateTime(), nullable=True),
        sa.Column('opt_in_keyword', sa.String(length=50), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_phone_opt_status_id', 'phone_opt_status', ['id'])
    op.create_index('ix_phone_opt_status_phone_number', 'phone_opt_status', ['phone_number'], unique=True)

    op.create_table(
        'compliance_log',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('phone_number', sa.String(length=32), nullable=False),
        sa.Column('event_type', sa.String(length=20), nullable=False),
        sa.Column('message_content', sa.Text(), nullable=True),
        sa.Column('campaign_type', sa.String(length=20), nullable=True),
        sa.Column('message_sid', sa.String(length=64), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_compliance_log_phone_number', 'compliance_log', ['phone_number'])
    op.create_index('ix_compliance_log_event_type', 'compliance_log', ['event_type'])

    op.create_table(
        'sms_webhook_log',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('phone_number', sa.String(length=32), nullable=False),
        sa.Column('to_number', sa.String(length=32), nullable=True),
        sa.Column('message_body', sa.Text(), nullable=False),
        sa.Column('message_sid', sa.String(length=64), nullable=True),
        sa.Column('webhook_type', sa.String(length=20), nullable=False, server_default='incoming'),
        sa.Column('processed_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('message_sid', name='uq_sms_webhook_log_message_sid'),
    )
    op.create_index('ix_sms_webhook_log_phone_number', 'sms_webhook_log', ['phone_number'])


def downgrade() -> None:
    op.drop_index('ix_sms_webhook_log_phone_number', table_name='sms_webhook_log')
    op.drop_table('sms_webhook_log')
    op.drop_index('ix_compliance_log_event_type', table_name='compliance_log')
    op.drop_index('ix_compliance_log_phone_number', table_name='compliance_log')
    op.drop_table('compliance_log')
    op.drop_index('ix_phone_opt_status_phone_number', table_name='phone_opt_status')
    op.drop_index('ix_phone_opt_status_id', table_name='phone_opt_status')
    op.drop_table('phone_opt_status')
