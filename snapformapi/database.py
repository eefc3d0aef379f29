import databases
import sqlalchemy
from snapformapi.config import config

metadata = sqlalchemy.MetaData()


user_table = sqlalchemy.Table(
    "user",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("email", sqlalchemy.String, unique=True, nullable=False),
    sqlalchemy.Column("name", sqlalchemy.String(128)),
    sqlalchemy.Column("password_hash", sqlalchemy.String, nullable=False),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, server_default=sqlalchemy.func.now()),
    sqlalchemy.Column("updated_at", sqlalchemy.DateTime, server_default=sqlalchemy.func.now()),
)

theme_table = sqlalchemy.Table(
    "theme",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("user_id", sqlalchemy.ForeignKey("user.id"), nullable=False),
    sqlalchemy.Column("name", sqlalchemy.String(128), nullable=False),
    sqlalchemy.Column("description", sqlalchemy.Text),
    sqlalchemy.Column("primary_color", sqlalchemy.String(7), nullable=False),
    sqlalchemy.Column("secondary_color", sqlalchemy.String(7), nullable=False),
    sqlalchemy.Column("background_color", sqlalchemy.String(7), nullable=False),
    sqlalchemy.Column("accent_color", sqlalchemy.String(7)),
    sqlalchemy.Column("text_color", sqlalchemy.String(7), nullable=False),
    sqlalchemy.Column("font_family", sqlalchemy.String(128), nullable=False),
    sqlalchemy.Column("is_public", sqlalchemy.Boolean, default=False),
    sqlalchemy.Column("default_animation", sqlalchemy.String(16), default="FADE"),
    sqlalchemy.Column("default_layout", sqlalchemy.String(16), default="standard"),
    sqlalchemy.Column("default_spacing", sqlalchemy.String(16), default="normal"),
    sqlalchemy.Column("border_radius", sqlalchemy.Integer, default=8),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, server_default=sqlalchemy.func.now()),
    sqlalchemy.Column("updated_at", sqlalchemy.DateTime, server_default=sqlalchemy.func.now()),
)

form_table = sqlalchemy.Table(
    "form",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("user_id", sqlalchemy.ForeignKey("user.id"), nullable=False),
    sqlalchemy.Column("name", sqlalchemy.String(256), nullable=False),
    sqlalchemy.Column("description", sqlalchemy.Text),
    sqlalchemy.Column("status", sqlalchemy.String(16), default="DRAFT"),  # DRAFT, ACTIVE, INACTIVE
    sqlalchemy.Column("collect_emails", sqlalchemy.Boolean, default=False),
    sqlalchemy.Column("limit_one_response_per_user", sqlalchemy.Boolean, default=False),
    sqlalchemy.Column("show_progress_bar", sqlalchemy.Boolean, default=False),
    sqlalchemy.Column("shuffle_questions", sqlalchemy.Boolean, default=False),
    sqlalchemy.Column("theme_id", sqlalchemy.ForeignKey("theme.id"), nullable=True),
    # fallback style when no theme is attached
    sqlalchemy.Column("primary_color", sqlalchemy.String(7)),
    sqlalchemy.Column("secondary_color", sqlalchemy.String(7)),
    sqlalchemy.Column("background_color", sqlalchemy.String(7)),
    sqlalchemy.Column("font_family", sqlalchemy.String(128)),
    sqlalchemy.Column("animation", sqlalchemy.String(16), default="FADE"),
    sqlalchemy.Column("animation_speed", sqlalchemy.String(16), default="MEDIUM"),
    sqlalchemy.Column("layout", sqlalchemy.String(16), default="standard"),
    sqlalchemy.Column("spacing", sqlalchemy.String(16), default="normal"),
    sqlalchemy.Column("border_radius", sqlalchemy.Integer, default=4),
    sqlalchemy.Column("response_count", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, server_default=sqlalchemy.func.now()),
    sqlalchemy.Column("updated_at", sqlalchemy.DateTime, server_default=sqlalchemy.func.now()),
)

formfield_table = sqlalchemy.Table(
    "form_field",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("form_id", sqlalchemy.ForeignKey("form.id"), nullable=False),
    sqlalchemy.Column("type", sqlalchemy.String(16), nullable=False),
    sqlalchemy.Column("label", sqlalchemy.String(256), nullable=False),
    sqlalchemy.Column("placeholder", sqlalchemy.String(256)),
    sqlalchemy.Column("required", sqlalchemy.Boolean, default=False),
    sqlalchemy.Column("options", sqlalchemy.JSON, default=[]),
    sqlalchemy.Column("order", sqlalchemy.Integer, default=0),
)

response_table = sqlalchemy.Table(
    "response",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("form_id", sqlalchemy.ForeignKey("form.id"), nullable=False),
    sqlalchemy.Column("email", sqlalchemy.String(256)),
    sqlalchemy.Column("completed", sqlalchemy.Boolean, default=False),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, server_default=sqlalchemy.func.now()),
)

fieldresponse_table = sqlalchemy.Table(
    "field_response",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("response_id", sqlalchemy.ForeignKey("response.id"), nullable=False),
    sqlalchemy.Column("field_id", sqlalchemy.ForeignKey("form_field.id"), nullable=False),
    sqlalchemy.Column("value", sqlalchemy.Text, nullable=False),
)


connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}
engine = sqlalchemy.create_engine(config.DATABASE_URL, connect_args=connect_args)

metadata.create_all(engine)
database = databases.Database(
    config.DATABASE_URL, force_rollback=config.DB_FORCE_ROLL_BACK
)


def as_dict(row, table: sqlalchemy.Table) -> dict:
    """Plain dict of a ``table.select()`` record, keyed by column name."""
    return {column.name: row[column.name] for column in table.columns}
