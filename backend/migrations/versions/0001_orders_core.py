"""vendors, menu items, orders, order items, audit logs

Revision ID: 0001_orders_core
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_orders_core'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('vendors',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=150), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table('menu_items',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('vendor_id', sa.String(length=32), sa.ForeignKey('vendors.id'), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('category', sa.String(length=80), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('vendor_id', 'name', name='uq_menu_item_vendor_name'),
    )
    op.create_index('ix_menu_items_vendor_id', 'menu_items', ['vendor_id'])

    op.create_table('orders',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('vendor_id', sa.String(length=32), sa.ForeignKey('vendors.id'), nullable=False),
        sa.Column('table_number', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='Kitchen'),
        sa.Column('server', sa.String(length=64), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('payment_method', sa.String(length=64), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    for col in ('vendor_id', 'table_number', 'status', 'created_at', 'updated_at'):
        op.create_index(f'ix_orders_{col}', 'orders', [col])

    op.create_table('order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.String(length=32), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('menu_item_id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('item_table_number', sa.Integer(), nullable=False),
        sa.Column('addons', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    op.create_table('audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('actor_id', sa.String(length=64), nullable=False),
        sa.Column('vendor_id', sa.String(length=32), nullable=True),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('entity', sa.String(length=64), nullable=True),
        sa.Column('entity_id', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    for col in ('actor_id', 'vendor_id', 'action'):
        op.create_index(f'ix_audit_logs_{col}', 'audit_logs', [col])


def downgrade():
    op.drop_table('audit_logs')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('menu_items')
    op.drop_table('vendors')
