"""marketplace_core

Revision ID: 3f2a9c1d7b4e
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b4e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=128), nullable=False, comment='User ID'),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Email'),
        sa.Column('phone', sa.String(length=20), nullable=True, comment='Phone number'),
        sa.Column('full_name', sa.String(length=100), nullable=True, comment='Full name'),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='buyer', comment='buyer/seller/admin'),
        sa.Column('wallet_balance', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0', comment='Withdrawable balance'),
        sa.Column('total_earnings', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0', comment='Lifetime earnings'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Creation time'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Last update time'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=False)

    op.create_table(
        'user_purchases',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False, comment='Buyer user ID'),
        sa.Column('product_id', sa.String(length=128), nullable=False, comment='Purchased product ID'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Purchase time'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_user_purchases_user_product'),
    )
    op.create_index('ix_user_purchases_user_id', 'user_purchases', ['user_id'], unique=False)

    op.create_table(
        'products',
        sa.Column('id', sa.String(length=128), nullable=False, comment='Product ID'),
        sa.Column('seller_id', sa.String(length=128), nullable=False, comment='Seller user ID'),
        sa.Column('title', sa.String(length=255), nullable=False, comment='Title'),
        sa.Column('price', sa.Numeric(precision=15, scale=2), nullable=False, comment='List price'),
        sa.Column('discount_price', sa.Numeric(precision=15, scale=2), nullable=True, comment='Discounted price'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending', comment='pending/approved/rejected'),
        sa.Column('sales', sa.Integer(), nullable=False, server_default='0', comment='Completed sale count'),
        sa.Column('thumbnail_url', sa.String(length=1024), nullable=True, comment='Thumbnail URL'),
        sa.Column('download_link', sa.Text(), nullable=True, comment='Encrypted download location'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Creation time'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Last update time'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_products_seller_id', 'products', ['seller_id'], unique=False)
    op.create_index('ix_products_status', 'products', ['status'], unique=False)

    op.create_table(
        'orders',
        sa.Column('id', sa.String(length=32), nullable=False, comment='Order ID'),
        sa.Column('buyer_id', sa.String(length=128), nullable=False, comment='Buyer user ID'),
        sa.Column('seller_id', sa.String(length=128), nullable=False, comment='Seller user ID'),
        sa.Column('product_id', sa.String(length=128), nullable=False, comment='Product ID'),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False, comment='Charged amount'),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='INR', comment='ISO-4217 currency'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending', comment='pending/completed/failed'),
        sa.Column('platform_fee', sa.Numeric(precision=15, scale=2), nullable=True, comment='Platform commission'),
        sa.Column('seller_earning', sa.Numeric(precision=15, scale=2), nullable=True, comment='Seller share'),
        sa.Column('payment_session_id', sa.String(length=255), nullable=True, comment='Gateway payment session ID'),
        sa.Column('failure_reason', sa.String(length=200), nullable=True, comment='Why the order failed'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Creation time'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Last update time'),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True, comment='Settlement time'),
        sa.Column('failed_at', sa.DateTime(timezone=True), nullable=True, comment='Failure time'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_buyer_id', 'orders', ['buyer_id'], unique=False)
    op.create_index('ix_orders_seller_id', 'orders', ['seller_id'], unique=False)
    op.create_index('ix_orders_product_id', 'orders', ['product_id'], unique=False)
    op.create_index('ix_orders_status', 'orders', ['status'], unique=False)
    op.create_index('ix_orders_created_at', 'orders', ['created_at'], unique=False)
    op.create_index('ix_orders_buyer_product_status', 'orders', ['buyer_id', 'product_id', 'status'], unique=False)

    op.create_table(
        'download_tokens',
        sa.Column('token', sa.String(length=128), nullable=False, comment='Token value'),
        sa.Column('user_id', sa.String(length=128), nullable=False, comment='Owning user ID'),
        sa.Column('product_id', sa.String(length=128), nullable=False, comment='Product ID'),
        sa.Column('target_url', sa.Text(), nullable=False, comment='Decrypted download location'),
        sa.Column('used', sa.Boolean(), nullable=False, server_default='false', comment='Whether redeemed'),
        sa.Column('used_at', sa.DateTime(timezone=True), nullable=True, comment='Redemption time'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False, comment='Expiry time'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Creation time'),
        sa.PrimaryKeyConstraint('token'),
    )
    op.create_index('ix_download_tokens_user_id', 'download_tokens', ['user_id'], unique=False)
    op.create_index('ix_download_tokens_user_product', 'download_tokens', ['user_id', 'product_id'], unique=False)

    op.create_table(
        'app_config',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('commission_rate', sa.Numeric(precision=5, scale=2), nullable=True, comment='Platform commission percent'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Last update time'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.execute("INSERT INTO app_config (id, commission_rate) VALUES ('app_config', 10)")


def downgrade() -> None:
    op.drop_table('app_config')
    op.drop_index('ix_download_tokens_user_product', table_name='download_tokens')
    op.drop_index('ix_download_tokens_user_id', table_name='download_tokens')
    op.drop_table('download_tokens')
    op.drop_index('ix_orders_buyer_product_status', table_name='orders')
    op.drop_index('ix_orders_created_at', table_name='orders')
    op.drop_index('ix_orders_status', table_name='orders')
    op.drop_index('ix_orders_product_id', table_name='orders')
    op.drop_index('ix_orders_seller_id', table_name='orders')
    op.drop_index('ix_orders_buyer_id', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_products_status', table_name='products')
    op.drop_index('ix_products_seller_id', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_user_purchases_user_id', table_name='user_purchases')
    op.drop_table('user_purchases')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
