"""create portal tables"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import text
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

ENUMS = {
    "user_role": ("admin", "student", "member"),
    "fee_level": ("village", "block", "district", "haryana"),
    "gallery_category": ("events", "health", "environment", "news", "education"),
    "transaction_type": ("donation", "membership", "fee", "other"),
    "transaction_status": ("pending", "approved", "rejected"),
}


def _enum(bind, name: str):
    values = ENUMS[name]
    if bind.dialect.name == "postgresql":
        result = bind.execute(text("SELECT 1 FROM pg_type WHERE typname = :name"), {"name": name})
        if not result.fetchone():
            labels = ", ".join(f"'{value}'" for value in values)
            bind.execute(text(f"CREATE TYPE {name} AS ENUM ({labels})"))
        return postgresql.ENUM(*values, name=name, create_type=False)
    return sa.Enum(*values, name=name)


def _timestamps(*names: str) -> list[sa.Column]:
    return [sa.Column(name, sa.DateTime(timezone=True), nullable=False) for name in names]


def upgrade() -> None:
    bind = op.get_bind()

    op.create_table(
        "user",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", _enum(bind, "user_role"), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps("created_at"),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)

    op.create_table(
        "student",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("registration_number", sa.String(length=32), nullable=False),
        sa.Column("class_name", sa.String(length=64), nullable=False),
        sa.Column("roll_number", sa.String(length=32), nullable=True),
        sa.Column("father_name", sa.String(length=255), nullable=True),
        sa.Column("mother_name", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=512), nullable=True),
        sa.Column("city", sa.String(length=128), nullable=True),
        sa.Column("state", sa.String(length=128), nullable=False),
        sa.Column("pincode", sa.String(length=16), nullable=True),
        sa.Column("date_of_birth", sa.String(length=32), nullable=True),
        sa.Column("gender", sa.String(length=16), nullable=True),
        sa.Column("photo_url", sa.String(length=1024), nullable=True),
        sa.Column("fee_level", _enum(bind, "fee_level"), nullable=False),
        sa.Column("fee_amount", sa.Integer(), nullable=False),
        sa.Column("fee_paid", sa.Boolean(), nullable=False),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps("created_at", "updated_at"),
    )
    op.create_index(
        op.f("ix_student_registration_number"),
        "student",
        ["registration_number"],
        unique=True,
    )

    op.create_table(
        "member",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("membership_number", sa.String(length=32), nullable=False),
        sa.Column("membership_type", sa.String(length=32), nullable=False),
        sa.Column("address", sa.String(length=512), nullable=True),
        sa.Column("city", sa.String(length=128), nullable=True),
        *_timestamps("created_at"),
    )
    op.create_index(
        op.f("ix_member_membership_number"),
        "member",
        ["membership_number"],
        unique=True,
    )

    op.create_table(
        "galleryimage",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("image_url", sa.String(length=1024), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("category", _enum(bind, "gallery_category"), nullable=False),
        sa.Column("date", sa.String(length=32), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps("created_at", "updated_at"),
    )

    op.create_table(
        "admitcard",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "student_id",
            sa.String(length=36),
            sa.ForeignKey("student.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("exam_name", sa.String(length=255), nullable=False),
        sa.Column("file_url", sa.String(length=1024), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("terms_english", sa.Text(), nullable=True),
        sa.Column("terms_hindi", sa.Text(), nullable=True),
        *_timestamps("uploaded_at"),
    )
    op.create_index(
        "ix_admitcard_student_uploaded",
        "admitcard",
        ["student_id", "uploaded_at"],
    )

    op.create_table(
        "paymenttransaction",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("type", _enum(bind, "transaction_type"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("transaction_id", sa.String(length=128), nullable=False),
        sa.Column("payment_method", sa.String(length=64), nullable=True),
        sa.Column("purpose", sa.String(length=255), nullable=True),
        sa.Column("photo_url", sa.String(length=1024), nullable=True),
        sa.Column("status", _enum(bind, "transaction_status"), nullable=False),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("user.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "student_id",
            sa.String(length=36),
            sa.ForeignKey("student.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column(
            "approved_by",
            sa.String(length=36),
            sa.ForeignKey("user.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps("created_at", "updated_at"),
    )
    op.create_index(
        "ix_paymenttransaction_user_created",
        "paymenttransaction",
        ["user_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("ix_paymenttransaction_user_created", table_name="paymenttransaction")
    op.drop_table("paymenttransaction")
    op.drop_index("ix_admitcard_student_uploaded", table_name="admitcard")
    op.drop_table("admitcard")
    op.drop_table("galleryimage")
    op.drop_index(op.f("ix_member_membership_number"), table_name="member")
    op.drop_table("member")
    op.drop_index(op.f("ix_student_registration_number"), table_name="student")
    op.drop_table("student")
    op.drop_index(op.f("ix_user_email"), table_name="user")
    op.drop_table("user")

    bind = op.get_bind()
    for name in reversed(ENUMS):
        if bind.dialect.name == "postgresql":
            bind.execute(text(f"DROP TYPE IF EXISTS {name}"))
        else:
            sa.Enum(name=name).drop(bind, checkfirst=True)
