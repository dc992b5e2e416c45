from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _counter(name):
    return sa.Column(name, sa.Integer(), nullable=False, server_default="0")


def upgrade():
    op.create_table(
        "player",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("role", sa.String(), nullable=False, unique=True),
        _counter("total_matches"),
        _counter("total_goals"),
        _counter("wins"),
        _counter("draws"),
        _counter("losses"),
        _counter("penalty_goals"),
        _counter("freekick_goals"),
        _counter("corner_goals"),
        _counter("own_goals"),
        _counter("conceded_matches"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "match",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("match_date", sa.String(), nullable=False),
        sa.Column("result", sa.String(), nullable=False),
        _counter("me_normal_goals"),
        _counter("me_penalty_goals"),
        _counter("me_freekick_goals"),
        _counter("me_corner_goals"),
        _counter("me_own_goals"),
        _counter("friend_normal_goals"),
        _counter("friend_penalty_goals"),
        _counter("friend_freekick_goals"),
        _counter("friend_corner_goals"),
        _counter("friend_own_goals"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_match_created_at", "match", ["created_at"])


def downgrade():
    op.drop_index("ix_match_created_at", table_name="match")
    for t in ["match", "player"]:
        op.drop_table(t)
