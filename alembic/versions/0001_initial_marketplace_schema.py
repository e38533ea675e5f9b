"""Initial marketplace schema

Creates:
1. creators and venues (accounts)
2. campaigns
3. applications
4. reviews
5. favorites
6. conversations and messages
7. notifications
8. activity_logs

Revision ID: 0001_initial_marketplace_schema
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = '0001_initial_marketplace_schema'
down_revision = None
branch_labels = None
depends_on = None

# Enum types are shared between tables, so they are created once up front
ENUMS = {
    'usertype': ('creator', 'venue'),
    'accountstatus': ('active', 'pending', 'suspended'),
    'campaignstatusdb': ('draft', 'active', 'paused', 'completed', 'cancelled'),
    'dealtypedb': ('free_product', 'free_service', 'discount', 'paid', 'experience'),
    'applicationstatusdb': ('pending', 'accepted', 'rejected', 'completed', 'cancelled'),
    'attachmenttypedb': ('image', 'file'),
}


def enum(name):
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    ]


def upgrade():
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    # 1. Accounts
    op.create_table(
        'creators',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('bio', sa.Text()),
        sa.Column('avatar', sa.String(500)),
        sa.Column('city', sa.String(100)),
        sa.Column('instagram_handle', sa.String(100)),
        sa.Column('instagram_followers', sa.Integer(), server_default='0'),
        sa.Column('tiktok_handle', sa.String(100)),
        sa.Column('tiktok_followers', sa.Integer(), server_default='0'),
        sa.Column('engagement_rate', sa.Float(), server_default='0'),
        sa.Column('status', enum('accountstatus'), server_default='active'),
        *timestamps(),
    )
    op.create_index('ix_creators_email', 'creators', ['email'], unique=True)
    op.create_index('ix_creators_username', 'creators', ['username'], unique=True)

    op.create_table(
        'venues',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100)),
        sa.Column('description', sa.Text()),
        sa.Column('logo', sa.String(500)),
        sa.Column('address', sa.String(255)),
        sa.Column('city', sa.String(100)),
        sa.Column('phone', sa.String(30)),
        sa.Column('website', sa.String(500)),
        sa.Column('instagram_handle', sa.String(100)),
        sa.Column('facebook_handle', sa.String(100)),
        sa.Column('tiktok_handle', sa.String(100)),
        sa.Column('rating', sa.Float(), server_default='0'),
        sa.Column('total_campaigns', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('response_time', sa.String(50)),
        sa.Column('status', enum('accountstatus'), server_default='active'),
        *timestamps(),
    )
    op.create_index('ix_venues_email', 'venues', ['email'], unique=True)

    # 2. Campaigns
    op.create_table(
        'campaigns',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('venue_id', sa.String(36), sa.ForeignKey('venues.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('cover_image', sa.String(500)),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('deal_type', enum('dealtypedb'), nullable=False),
        sa.Column('offer_description', sa.String(200), nullable=False),
        sa.Column('offer_value', sa.Float(), nullable=False, server_default='0'),
        sa.Column('discount_amount', sa.String(50)),
        sa.Column('coupon_code', sa.String(50)),
        sa.Column('address', sa.String(255)),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime()),
        sa.Column('schedule_launch_date', sa.DateTime()),
        sa.Column('spots_total', sa.Integer(), nullable=False),
        sa.Column('spots_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_applicants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_accepted', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_reach', sa.Integer(), server_default='0'),
        sa.Column('required_platforms', sa.JSON(), nullable=False),
        sa.Column('requires_photo', sa.Boolean(), server_default=sa.false()),
        sa.Column('requires_video', sa.Boolean(), server_default=sa.false()),
        sa.Column('min_followers', sa.Integer()),
        sa.Column('min_engagement_rate', sa.Float()),
        sa.Column('tags', sa.JSON()),
        sa.Column('status', enum('campaignstatusdb'), nullable=False, server_default='active'),
        *timestamps(),
        sa.CheckConstraint('spots_used >= 0 AND spots_used <= spots_total', name='ck_campaign_spots'),
    )
    op.create_index('ix_campaigns_venue_id', 'campaigns', ['venue_id'])

    # 3. Applications
    op.create_table(
        'applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('campaign_id', sa.String(36), sa.ForeignKey('campaigns.id', ondelete='CASCADE'), nullable=False),
        sa.Column('creator_id', sa.String(36), sa.ForeignKey('creators.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', enum('applicationstatusdb'), nullable=False, server_default='pending'),
        sa.Column('creator_note', sa.Text()),
        sa.Column('venue_note', sa.Text()),
        sa.Column('applied_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('reviewed_at', sa.DateTime()),
        sa.Column('completed_at', sa.DateTime()),
        sa.Column('visit_date', sa.DateTime()),
        *timestamps(),
        sa.UniqueConstraint('campaign_id', 'creator_id', name='uq_application_campaign_creator'),
    )
    op.create_index('ix_applications_campaign_id', 'applications', ['campaign_id'])
    op.create_index('ix_applications_creator_id', 'applications', ['creator_id'])

    # 4. Reviews
    op.create_table(
        'reviews',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('application_id', sa.String(36), sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reviewer_id', sa.String(36), nullable=False),
        sa.Column('reviewee_id', sa.String(36), nullable=False),
        sa.Column('reviewer_type', enum('usertype'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text()),
        *timestamps(),
        sa.UniqueConstraint('application_id', 'reviewer_id', name='uq_review_application_reviewer'),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_review_rating'),
    )
    op.create_index('ix_reviews_application_id', 'reviews', ['application_id'])
    op.create_index('ix_reviews_reviewee_id', 'reviews', ['reviewee_id'])

    # 5. Favorites
    op.create_table(
        'favorites',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('creator_id', sa.String(36), sa.ForeignKey('creators.id', ondelete='CASCADE'), nullable=False),
        sa.Column('campaign_id', sa.String(36), sa.ForeignKey('campaigns.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint('creator_id', 'campaign_id', name='uq_favorite_creator_campaign'),
    )

    # 6. Messaging
    op.create_table(
        'conversations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('creator_id', sa.String(36), sa.ForeignKey('creators.id', ondelete='CASCADE'), nullable=False),
        sa.Column('venue_id', sa.String(36), sa.ForeignKey('venues.id', ondelete='CASCADE'), nullable=False),
        sa.Column('application_id', sa.String(36), sa.ForeignKey('applications.id', ondelete='SET NULL'), nullable=True),
        sa.Column('last_message_at', sa.DateTime()),
        sa.Column('creator_unread_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('venue_unread_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('message_count', sa.Integer(), nullable=False, server_default='0'),
        *timestamps(),
        sa.UniqueConstraint('creator_id', 'venue_id', name='uq_conversation_creator_venue'),
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('conversation_id', sa.String(36), sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('sender_id', sa.String(36), nullable=False),
        sa.Column('sender_type', enum('usertype'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('attachment_url', sa.String(500)),
        sa.Column('attachment_type', enum('attachmenttypedb'), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint('conversation_id', 'sequence', name='uq_message_conversation_sequence'),
    )
    op.create_index('ix_messages_conversation_id', 'messages', ['conversation_id'])
    op.create_index('ix_messages_created_at', 'messages', ['created_at'])

    # 7. Notifications
    op.create_table(
        'notifications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('user_type', enum('usertype'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text()),
        sa.Column('data', sa.JSON()),
        sa.Column('read', sa.Boolean(), server_default=sa.false()),
        sa.Column('read_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    # 8. Activity log
    op.create_table(
        'activity_logs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('venue_id', sa.String(36), sa.ForeignKey('venues.id', ondelete='CASCADE'), nullable=True),
        sa.Column('creator_id', sa.String(36), sa.ForeignKey('creators.id', ondelete='CASCADE'), nullable=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('metadata_json', sa.JSON()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_activity_logs_venue_id', 'activity_logs', ['venue_id'])
    op.create_index('ix_activity_logs_creator_id', 'activity_logs', ['creator_id'])


def downgrade():
    for table in (
        'activity_logs',
        'notifications',
        'messages',
        'conversations',
        'favorites',
        'reviews',
        'applications',
        'campaigns',
        'venues',
        'creators',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name in ENUMS:
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
