from datetime import datetime, timezone

from flask_login import UserMixin

from smartmark.extensions import db, login_manager


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    provider = db.Column(db.String(64), nullable=False)
    provider_subject = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(320), nullable=True, index=True)
    display_name = db.Column(db.String(255), nullable=True)
    avatar_url = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    last_sign_in_at = db.Column(db.DateTime(timezone=True), nullable=True)

    bookmarks = db.relationship("Bookmark", backref="user", lazy=True)

    __table_args__ = (
        db.UniqueConstraint(
            "provider", "provider_subject", name="uq_user_provider_subject"
        ),
    )


@login_manager.user_loader
def load_user(user_id: str):
    return db.session.get(User, int(user_id))


class Bookmark(db.Model):
    __tablename__ = "bookmarks"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    title = db.Column(db.String(200), nullable=False)
    url = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    # Not unique: duplicates are rejected by a lookup before insert.
    __table_args__ = (db.Index("ix_bookmark_user_url", "user_id", "url"),)

    def as_dict(self):
        created_at = self.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "url": self.url,
            "created_at": created_at.isoformat(),
        }


class BookmarkChange(db.Model):
    __tablename__ = "bookmark_changes"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    event_type = db.Column(db.String(16), nullable=False)
    bookmark_id = db.Column(db.Integer, nullable=False)
    new = db.Column(db.JSON, nullable=True)
    old = db.Column(db.JSON, nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )

    __table_args__ = (db.Index("ix_change_user_cursor", "user_id", "id"),)
