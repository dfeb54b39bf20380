"""initial_marine_ops_schema

Creates the dashboard tables: profiles, vessel, work_order, work_details,
work_progress, project_progress, work_verification, invoice_details and
activity_log.  Every business table carries deleted_at (soft delete).

Revision ID: 5c2e8f14a7d3
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c2e8f14a7d3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    ]


def _soft_delete_index(table: str) -> None:
    op.create_index(f'ix_{table}_deleted_at', table, ['deleted_at'])


def upgrade() -> None:
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('email', sa.String(200), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(200), nullable=False),
        sa.Column('name', sa.String(300), nullable=True),
        sa.Column('role', sa.String(50), nullable=False, server_default='OPERATION'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'vessel',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('type', sa.String(100), nullable=True),
        sa.Column('company', sa.String(200), nullable=True),
        *_timestamps(),
    )
    _soft_delete_index('vessel')

    op.create_table(
        'work_order',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('vessel_id', sa.Integer(), sa.ForeignKey('vessel.id'), nullable=False, index=True),
        sa.Column('customer_wo_number', sa.String(100), nullable=True),
        sa.Column('customer_wo_date', sa.Date(), nullable=True),
        sa.Column('shipyard_wo_number', sa.String(100), nullable=True),
        sa.Column('shipyard_wo_date', sa.Date(), nullable=True),
        sa.Column('wo_document_delivery_date', sa.Date(), nullable=True),
        sa.Column('wo_location', sa.String(300), nullable=True),
        sa.Column('wo_description', sa.String(2000), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        *_timestamps(),
    )
    _soft_delete_index('work_order')

    op.create_table(
        'work_details',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('work_order_id', sa.Integer(), sa.ForeignKey('work_order.id'), nullable=False, index=True),
        sa.Column('description', sa.String(2000), nullable=False),
        sa.Column('location', sa.String(300), nullable=True),
        sa.Column('pic', sa.String(200), nullable=True),
        sa.Column('planned_start_date', sa.Date(), nullable=True),
        sa.Column('target_close_date', sa.Date(), nullable=True),
        sa.Column('period_close_target', sa.String(100), nullable=True),
        sa.Column('actual_start_date', sa.Date(), nullable=True),
        sa.Column('actual_close_date', sa.Date(), nullable=True),
        sa.Column('work_permit_url', sa.String(1000), nullable=True),
        sa.Column('storage_path', sa.String(500), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        *_timestamps(),
    )
    _soft_delete_index('work_details')

    op.create_table(
        'work_progress',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('work_details_id', sa.Integer(), sa.ForeignKey('work_details.id'), nullable=False, index=True),
        sa.Column('progress_percentage', sa.Numeric(5, 2), nullable=False),
        sa.Column('report_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.String(2000), nullable=True),
        sa.Column('evidence_url', sa.String(1000), nullable=True),
        sa.Column('storage_path', sa.String(500), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        *_timestamps(),
    )
    _soft_delete_index('work_progress')

    op.create_table(
        'project_progress',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('work_order_id', sa.Integer(), sa.ForeignKey('work_order.id'), nullable=False, index=True),
        sa.Column('progress', sa.Numeric(5, 2), nullable=False),
        sa.Column('report_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.String(2000), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        *_timestamps(),
    )
    _soft_delete_index('project_progress')

    op.create_table(
        'work_verification',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('work_details_id', sa.Integer(), sa.ForeignKey('work_details.id'), nullable=False, index=True),
        sa.Column('work_verification', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('verification_date', sa.Date(), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        *_timestamps(),
    )
    _soft_delete_index('work_verification')

    op.create_table(
        'invoice_details',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('work_order_id', sa.Integer(), sa.ForeignKey('work_order.id'), nullable=False, index=True),
        sa.Column('wo_document_collection_date', sa.Date(), nullable=True),
        sa.Column('invoice_number', sa.String(100), nullable=True),
        sa.Column('faktur_number', sa.String(100), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('delivery_date', sa.Date(), nullable=True),
        sa.Column('collection_date', sa.Date(), nullable=True),
        sa.Column('receiver_name', sa.String(200), nullable=True),
        sa.Column('payment_price', sa.Numeric(15, 2), nullable=True),
        sa.Column('payment_status', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('payment_date', sa.Date(), nullable=True),
        sa.Column('remarks', sa.String(2000), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        *_timestamps(),
    )
    _soft_delete_index('invoice_details')

    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('table_name', sa.String(100), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.String(1000), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('activity_log')
    for table in (
        'invoice_details',
        'work_verification',
        'project_progress',
        'work_progress',
        'work_details',
        'work_order',
        'vessel',
    ):
        op.drop_index(f'ix_{table}_deleted_at', table_name=table)
        op.drop_table(table)
    op.drop_table('profiles')
