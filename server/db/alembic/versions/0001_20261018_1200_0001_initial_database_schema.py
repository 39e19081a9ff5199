"""Initial database schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _uuid_pk() -> sa.Column:
    return sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade database schema."""
    # Create destinations table
    op.create_table('destinations',
        _uuid_pk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        sa.Column('payment_url', sa.String(length=1024), nullable=True),
        sa.Column('is_featured', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('best_time_to_visit', sa.String(length=255), nullable=True),
        sa.Column('difficulty_level', sa.String(length=50), nullable=True),
        sa.Column('duration_recommended', sa.String(length=100), nullable=True),
        sa.Column('getting_there', sa.Text(), nullable=True),
        sa.Column('weather_info', sa.Text(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('activities', sa.JSON(), server_default='[]', nullable=False),
        sa.Column('amenities', sa.JSON(), server_default='[]', nullable=False),
        sa.Column('categories', sa.JSON(), server_default='[]', nullable=False),
        sa.Column('highlights', sa.JSON(), server_default='[]', nullable=False),
        sa.Column('what_to_bring', sa.JSON(), server_default='[]', nullable=False),
        sa.Column('additional_images', sa.JSON(), server_default='[]', nullable=False),
        sa.Column('additional_costs', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('price >= 0', name='ck_destination_price_non_negative'),
        sa.CheckConstraint('length(name) > 0', name='ck_destination_name_not_empty'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_destinations_name'), 'destinations', ['name'], unique=False)
    op.create_index(op.f('ix_destinations_location'), 'destinations', ['location'], unique=False)
    op.create_index(op.f('ix_destinations_is_featured'), 'destinations', ['is_featured'], unique=False)

    # Create accommodations table
    op.create_table('accommodations',
        _uuid_pk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price_per_night', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('max_guests', sa.Integer(), nullable=True),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        sa.Column('is_featured', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('review_count', sa.Integer(), server_default='0', nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('amenities', sa.JSON(), server_default='[]', nullable=False),
        sa.Column('additional_images', sa.JSON(), server_default='[]', nullable=False),
        sa.Column('room_types', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('price_per_night >= 0', name='ck_accommodation_price_non_negative'),
        sa.CheckConstraint('max_guests IS NULL OR max_guests > 0', name='ck_accommodation_max_guests_positive'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_accommodations_name'), 'accommodations', ['name'], unique=False)
    op.create_index(op.f('ix_accommodations_location'), 'accommodations', ['location'], unique=False)
    op.create_index(op.f('ix_accommodations_is_featured'), 'accommodations', ['is_featured'], unique=False)

    # Create events table
    op.create_table('events',
        _uuid_pk(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('event_type', sa.String(length=100), nullable=True),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        sa.Column('payment_url', sa.String(length=1024), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('program_name', sa.String(length=255), nullable=True),
        sa.Column('program_type', sa.String(length=100), nullable=True),
        sa.Column('program_url', sa.String(length=1024), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('ticket_types', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('price IS NULL OR price >= 0', name='ck_event_price_non_negative'),
        sa.CheckConstraint('length(title) > 0', name='ck_event_title_not_empty'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_events_title'), 'events', ['title'], unique=False)
    op.create_index(op.f('ix_events_location'), 'events', ['location'], unique=False)
    op.create_index(op.f('ix_events_start_date'), 'events', ['start_date'], unique=False)

    # Create profiles table; ids come from the identity service
    op.create_table('profiles',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('username', sa.String(length=100), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('avatar_url', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=20), server_default='user', nullable=False),
        sa.Column('is_locked', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username')
    )
    op.create_index(op.f('ix_profiles_email'), 'profiles', ['email'], unique=False)
    op.create_index(op.f('ix_profiles_role'), 'profiles', ['role'], unique=False)

    # Create bookings table
    op.create_table('bookings',
        _uuid_pk(),
        sa.Column('user_id', sa.String(length=255), nullable=True),
        sa.Column('destination_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('event_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('accommodation_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('contact_name', sa.String(length=255), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=False),
        sa.Column('contact_phone', sa.String(length=50), nullable=False),
        sa.Column('booking_date', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('preferred_date', sa.Date(), nullable=True),
        sa.Column('number_of_people', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('booking_details', sa.JSON(), nullable=True),
        sa.Column('selected_ticket_type', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('payment_status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('payment_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('payment_proof_url', sa.String(length=1024), nullable=True),
        sa.Column('payment_proof_uploaded_at', sa.DateTime(), nullable=True),
        sa.Column('confirmation_date', sa.DateTime(), nullable=True),
        sa.Column('cancellation_date', sa.DateTime(), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('completion_date', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('number_of_people >= 1', name='ck_booking_people_positive'),
        sa.CheckConstraint('total_price >= 0', name='ck_booking_total_price_non_negative'),
        sa.CheckConstraint(
            '(CASE WHEN destination_id IS NULL THEN 0 ELSE 1 END'
            ' + CASE WHEN event_id IS NULL THEN 0 ELSE 1 END'
            ' + CASE WHEN accommodation_id IS NULL THEN 0 ELSE 1 END) <= 1',
            name='ck_booking_single_target'
        ),
        sa.ForeignKeyConstraint(['destination_id'], ['destinations.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['accommodation_id'], ['accommodations.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bookings_user_id'), 'bookings', ['user_id'], unique=False)
    op.create_index(op.f('ix_bookings_destination_id'), 'bookings', ['destination_id'], unique=False)
    op.create_index(op.f('ix_bookings_event_id'), 'bookings', ['event_id'], unique=False)
    op.create_index(op.f('ix_bookings_accommodation_id'), 'bookings', ['accommodation_id'], unique=False)
    op.create_index(op.f('ix_bookings_contact_email'), 'bookings', ['contact_email'], unique=False)
    op.create_index(op.f('ix_bookings_preferred_date'), 'bookings', ['preferred_date'], unique=False)
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'], unique=False)
    op.create_index(op.f('ix_bookings_payment_status'), 'bookings', ['payment_status'], unique=False)
    op.create_index(op.f('ix_bookings_payment_id'), 'bookings', ['payment_id'], unique=False)

    # Create payments table
    op.create_table('payments',
        _uuid_pk(),
        sa.Column('booking_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('payment_gateway', sa.String(length=50), server_default='manual', nullable=True),
        sa.Column('payment_gateway_reference', sa.String(length=255), nullable=True),
        sa.Column('payment_intent_id', sa.String(length=255), nullable=True),
        sa.Column('payment_details', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount >= 0', name='ck_payment_amount_non_negative'),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_payments_booking_id'), 'payments', ['booking_id'], unique=False)
    op.create_index(op.f('ix_payments_status'), 'payments', ['status'], unique=False)

    # Create reviews table
    op.create_table('reviews',
        _uuid_pk(),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('destination_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), server_default='[]', nullable=False),
        *_timestamps(),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
        sa.ForeignKeyConstraint(['destination_id'], ['destinations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_reviews_user_id'), 'reviews', ['user_id'], unique=False)
    op.create_index(op.f('ix_reviews_destination_id'), 'reviews', ['destination_id'], unique=False)

    # Create wishlists table
    op.create_table('wishlists',
        _uuid_pk(),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('destination_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['destination_id'], ['destinations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'destination_id', name='uq_wishlist_user_destination')
    )
    op.create_index(op.f('ix_wishlists_user_id'), 'wishlists', ['user_id'], unique=False)
    op.create_index(op.f('ix_wishlists_destination_id'), 'wishlists', ['destination_id'], unique=False)

    # Create itineraries and their stops
    op.create_table('itineraries',
        _uuid_pk(),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_public', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('share_code', sa.String(length=16), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('share_code')
    )
    op.create_index(op.f('ix_itineraries_user_id'), 'itineraries', ['user_id'], unique=False)
    op.create_index(op.f('ix_itineraries_share_code'), 'itineraries', ['share_code'], unique=False)

    op.create_table('itinerary_destinations',
        _uuid_pk(),
        sa.Column('itinerary_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('destination_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('order', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.CheckConstraint('end_date >= start_date', name='ck_itinerary_stop_dates_ordered'),
        sa.CheckConstraint('"order" >= 0', name='ck_itinerary_stop_order_non_negative'),
        sa.ForeignKeyConstraint(['itinerary_id'], ['itineraries.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['destination_id'], ['destinations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_itinerary_destinations_itinerary_id'), 'itinerary_destinations', ['itinerary_id'], unique=False)
    op.create_index(op.f('ix_itinerary_destinations_destination_id'), 'itinerary_destinations', ['destination_id'], unique=False)

    # Create cart_items table
    op.create_table('cart_items',
        _uuid_pk(),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('destination_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('event_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('quantity', sa.Integer(), server_default='1', nullable=False),
        sa.Column('preferred_date', sa.Date(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('quantity >= 1', name='ck_cart_item_quantity_positive'),
        sa.ForeignKeyConstraint(['destination_id'], ['destinations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_cart_items_user_id'), 'cart_items', ['user_id'], unique=False)

    # Create notifications table
    op.create_table('notifications',
        _uuid_pk(),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=50), server_default='info', nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_notifications_user_id'), 'notifications', ['user_id'], unique=False)
    op.create_index(op.f('ix_notifications_is_read'), 'notifications', ['is_read'], unique=False)

    # Create chat tables
    op.create_table('chat_conversations',
        _uuid_pk(),
        sa.Column('user_id', sa.String(length=255), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_chat_conversations_user_id'), 'chat_conversations', ['user_id'], unique=False)

    op.create_table('chat_messages',
        _uuid_pk(),
        sa.Column('conversation_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['conversation_id'], ['chat_conversations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_chat_messages_conversation_id'), 'chat_messages', ['conversation_id'], unique=False)

    # Create audit_logs table
    op.create_table('audit_logs',
        _uuid_pk(),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('table_name', sa.String(length=100), nullable=False),
        sa.Column('record_id', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=True),
        sa.Column('new_data', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_audit_logs_action'), 'audit_logs', ['action'], unique=False)
    op.create_index(op.f('ix_audit_logs_table_name'), 'audit_logs', ['table_name'], unique=False)
    op.create_index(op.f('ix_audit_logs_user_id'), 'audit_logs', ['user_id'], unique=False)

    # Create api_docs table
    op.create_table('api_docs',
        _uuid_pk(),
        sa.Column('endpoint_path', sa.String(length=255), nullable=False),
        sa.Column('method', sa.String(length=10), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('request_schema', sa.JSON(), nullable=True),
        sa.Column('response_schema', sa.JSON(), nullable=True),
        sa.Column('tags', sa.JSON(), server_default='[]', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('endpoint_path', 'method', name='uq_api_doc_endpoint_method')
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table('api_docs')
    op.drop_table('audit_logs')
    op.drop_table('chat_messages')
    op.drop_table('chat_conversations')
    op.drop_table('notifications')
    op.drop_table('cart_items')
    op.drop_table('itinerary_destinations')
    op.drop_table('itineraries')
    op.drop_table('wishlists')
    op.drop_table('reviews')
    op.drop_table('payments')
    op.drop_table('bookings')
    op.drop_table('profiles')
    op.drop_table('events')
    op.drop_table('accommodations')
    op.drop_table('destinations')
