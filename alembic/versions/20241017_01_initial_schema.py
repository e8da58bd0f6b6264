"""Initial Tripmate schema

Revision ID: 20241017_01
Revises:
Create Date: 2024-10-17
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20241017_01'
down_revision = None
branch_labels = None
depends_on = None

ID = sa.String(32)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', ID, primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=True, unique=True),
        sa.Column('profile_pic', sa.String(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'friendships',
        sa.Column('user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('friend_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_table(
        'friend_requests',
        sa.Column('id', ID, primary_key=True),
        sa.Column('from_user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('to_user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(10), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_friend_requests_from_user_id', 'friend_requests', ['from_user_id'])
    op.create_index('ix_friend_requests_to_user_id', 'friend_requests', ['to_user_id'])

    op.create_table(
        'groups',
        sa.Column('id', ID, primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_by', ID, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('total_expenses', sa.Numeric(18, 2), nullable=False),
        sa.Column('last_activity', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'group_members',
        sa.Column('group_id', ID, sa.ForeignKey('groups.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'trips',
        sa.Column('id', ID, primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('destination', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('coordinates', sa.JSON(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('budget', sa.Numeric(18, 2), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('group_id', ID, sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_by', ID, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_trips_group_id', 'trips', ['group_id'])
    op.create_table(
        'trip_members',
        sa.Column('trip_id', ID, sa.ForeignKey('trips.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role', sa.String(10), nullable=False),
    )
    op.create_table(
        'trip_shared_users',
        sa.Column('trip_id', ID, sa.ForeignKey('trips.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_table(
        'trip_shared_groups',
        sa.Column('trip_id', ID, sa.ForeignKey('trips.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('group_id', ID, sa.ForeignKey('groups.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'expenses',
        sa.Column('id', ID, primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('type', sa.String(10), nullable=False),
        sa.Column('is_group_expense', sa.Boolean(), nullable=True),
        sa.Column('status', sa.String(10), nullable=False),
        sa.Column('group_id', ID, sa.ForeignKey('groups.id', ondelete='SET NULL'), nullable=True),
        sa.Column('trip_id', ID, sa.ForeignKey('trips.id', ondelete='SET NULL'), nullable=True),
        sa.Column('user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_by', ID, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_expenses_group_id', 'expenses', ['group_id'])
    op.create_index('ix_expenses_trip_id', 'expenses', ['trip_id'])
    op.create_index('ix_expenses_user_id', 'expenses', ['user_id'])
    op.create_table(
        'expense_shares',
        sa.Column('id', ID, primary_key=True),
        sa.Column('expense_id', ID, sa.ForeignKey('expenses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('status', sa.String(10), nullable=False),
    )
    op.create_index('ix_expense_shares_expense_id', 'expense_shares', ['expense_id'])
    op.create_index('ix_expense_shares_user_id', 'expense_shares', ['user_id'])

    op.create_table(
        'messages',
        sa.Column('id', ID, primary_key=True),
        sa.Column('sender_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('receiver_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('group_id', ID, sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=True),
        sa.Column('text', sa.Text(), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('reactions', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_messages_group_created', 'messages', ['group_id', 'created_at'])
    op.create_index('ix_messages_pair_created', 'messages', ['sender_id', 'receiver_id', 'created_at'])

    op.create_table(
        'notifications',
        sa.Column('id', ID, primary_key=True),
        sa.Column('user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_user_read', 'notifications', ['user_id', 'read'])

    op.create_table(
        'notes',
        sa.Column('id', ID, primary_key=True),
        sa.Column('user_id', ID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('coordinates', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_notes_user_id', 'notes', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_notes_user_id', table_name='notes')
    op.drop_table('notes')
    op.drop_index('ix_notifications_user_read', table_name='notifications')
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_messages_pair_created', table_name='messages')
    op.drop_index('ix_messages_group_created', table_name='messages')
    op.drop_table('messages')
    op.drop_index('ix_expense_shares_user_id', table_name='expense_shares')
    op.drop_index('ix_expense_shares_expense_id', table_name='expense_shares')
    op.drop_table('expense_shares')
    op.drop_index('ix_expenses_user_id', table_name='expenses')
    op.drop_index('ix_expenses_trip_id', table_name='expenses')
    op.drop_index('ix_expenses_group_id', table_name='expenses')
    op.drop_table('expenses')
    op.drop_table('trip_shared_groups')
    op.drop_table('trip_shared_users')
    op.drop_table('trip_members')
    op.drop_index('ix_trips_group_id', table_name='trips')
    op.drop_table('trips')
    op.drop_table('group_members')
    op.drop_table('groups')
    op.drop_index('ix_friend_requests_to_user_id', table_name='friend_requests')
    op.drop_index('ix_friend_requests_from_user_id', table_name='friend_requests')
    op.drop_table('friend_requests')
    op.drop_table('friendships')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
