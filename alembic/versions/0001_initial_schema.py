"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')
MONEY = sa.Numeric(10, 2)


def _timestamps(updated: bool = True):
    columns = [sa.Column('created_at', sa.DateTime(), nullable=False)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(), nullable=False))
    return columns


def upgrade() -> None:
    """Create every Elevion table."""

    # Accounts and inbound contact
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(64), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100)),
        sa.Column('last_name', sa.String(100)),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('stripe_customer_id', sa.String()),
        sa.Column('preferences', sa.String()),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime()),
        *_timestamps(),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_stripe_customer_id', 'users', ['stripe_customer_id'])

    op.create_table(
        'contact_submissions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('company', sa.String(200)),
        sa.Column('message', sa.String(), nullable=False),
        *_timestamps(updated=False),
    )

    op.create_table(
        'client_previews',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(64), nullable=False),
        sa.Column('client_name', sa.String(200), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_client_previews_code', 'client_previews', ['code'], unique=True)

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(300), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author_id', sa.Integer(), sa.ForeignKey('users.id')),
        sa.Column('category', sa.String(100)),
        sa.Column('tags', JSON_TYPE, nullable=False),
        sa.Column('image_url', sa.String()),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('view_count', sa.Integer(), nullable=False),
        sa.Column('like_count', sa.Integer(), nullable=False),
        *_timestamps(),
    )

    # Subscriptions
    op.create_table(
        'subscription_plans',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('price', MONEY, nullable=False),
        sa.Column('interval', sa.String(20), nullable=False),
        sa.Column('features', JSON_TYPE, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('stripe_price_id', sa.String(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_subscription_plans_price', 'subscription_plans', ['price'])

    op.create_table(
        'user_subscriptions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('plan_id', sa.Integer(), sa.ForeignKey('subscription_plans.id'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('current_period_start', sa.DateTime(), nullable=False),
        sa.Column('current_period_end', sa.DateTime(), nullable=False),
        sa.Column('cancel_at_period_end', sa.Boolean(), nullable=False),
        sa.Column('stripe_subscription_id', sa.String(), nullable=False),
        sa.Column('stripe_customer_id', sa.String(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_user_subscriptions_user_id', 'user_subscriptions', ['user_id'])

    # Marketplace
    op.create_table(
        'marketplace_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', MONEY, nullable=False),
        sa.Column('seller_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('tags', JSON_TYPE, nullable=False),
        sa.Column('images', JSON_TYPE, nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('stripe_product_id', sa.String()),
        sa.Column('stripe_price_id', sa.String()),
        *_timestamps(),
    )
    op.create_index('ix_marketplace_items_seller_id', 'marketplace_items', ['seller_id'])
    op.create_index('ix_marketplace_items_category', 'marketplace_items', ['category'])

    op.create_table(
        'marketplace_orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('buyer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('marketplace_items.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('total_price', MONEY, nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('stripe_payment_intent_id', sa.String()),
        *_timestamps(),
    )
    op.create_index('ix_marketplace_orders_buyer_id', 'marketplace_orders', ['buyer_id'])

    # Advertising
    op.create_table(
        'advertisements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('target_url', sa.String(), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('position', sa.String(20)),
        sa.Column('impressions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_advertisements_type', 'advertisements', ['type'])

    # Feedback and mockups
    op.create_table(
        'feedback',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id')),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('source', sa.String(50), nullable=False),
        sa.Column('category', sa.String(50)),
        sa.Column('rating', sa.Integer()),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_feedback_status', 'feedback', ['status'])

    op.create_table(
        'mockup_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id')),
        sa.Column('business_type', sa.String(200), nullable=False),
        sa.Column('business_goals', sa.String()),
        sa.Column('industry_category', sa.String()),
        sa.Column('target_audience', sa.String()),
        sa.Column('design_preferences', sa.String()),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('completion_time', MONEY),
        sa.Column('feedback', sa.String()),
        *_timestamps(),
    )
    op.create_index('ix_mockup_requests_user_id', 'mockup_requests', ['user_id'])
    op.create_index('ix_mockup_requests_status', 'mockup_requests', ['status'])

    # Pricing
    op.create_table(
        'price_recommendations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('plan_id', sa.Integer(), sa.ForeignKey('subscription_plans.id'), nullable=False),
        sa.Column('current_price', MONEY, nullable=False),
        sa.Column('recommended_price', MONEY, nullable=False),
        sa.Column('percent_change', MONEY, nullable=False),
        sa.Column('analysis_data', JSON_TYPE, nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('expires_at', sa.DateTime()),
        *_timestamps(),
    )
    op.create_index('ix_price_recommendations_plan_id', 'price_recommendations', ['plan_id'])
    op.create_index('ix_price_recommendations_status', 'price_recommendations', ['status'])

    op.create_table(
        'price_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('plan_id', sa.Integer(), sa.ForeignKey('subscription_plans.id'), nullable=False),
        sa.Column('previous_price', MONEY, nullable=False),
        sa.Column('new_price', MONEY, nullable=False),
        sa.Column('change_reason', sa.String()),
        sa.Column('ai_analysis', JSON_TYPE),
        sa.Column('changed_by_user_id', sa.Integer(), sa.ForeignKey('users.id')),
        sa.Column('is_automatic', sa.Boolean(), nullable=False),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index('ix_price_history_plan_id', 'price_history', ['plan_id'])

    # Analytics
    op.create_table(
        'user_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id')),
        sa.Column('session_duration', MONEY, nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime()),
        sa.Column('device', sa.String(20)),
        sa.Column('browser', sa.String(50)),
        sa.Column('ip_address', sa.String(64)),
        sa.Column('referrer', sa.String()),
        *_timestamps(),
    )
    op.create_index('ix_user_sessions_user_id', 'user_sessions', ['user_id'])
    op.create_index('ix_user_sessions_start_time', 'user_sessions', ['start_time'])

    op.create_table(
        'content_view_metrics',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('content_id', sa.Integer(), nullable=False),
        sa.Column('content_type', sa.String(50), nullable=False),
        sa.Column('content_title', sa.String(300), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unique_views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('avg_time_on_page', MONEY, nullable=False),
        sa.Column('bounce_rate', MONEY, nullable=False),
        sa.Column('conversion_rate', MONEY, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('content_id', 'content_type', name='uq_content_view_metrics_content'),
    )

    op.create_table(
        'service_engagement',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('service_id', sa.Integer(), nullable=False),
        sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('inquiries', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('conversions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_engaged_at', sa.DateTime(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index('ix_service_engagement_service_id', 'service_engagement', ['service_id'], unique=True)


def downgrade() -> None:
    for table in (
        'service_engagement',
        'content_view_metrics',
        'user_sessions',
        'price_history',
        'price_recommendations',
        'mockup_requests',
        'feedback',
        'advertisements',
        'marketplace_orders',
        'marketplace_items',
        'user_subscriptions',
        'subscription_plans',
        'posts',
        'client_previews',
        'contact_submissions',
        'users',
    ):
        op.drop_table(table)
