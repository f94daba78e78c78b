from datetime import datetime, timezone
from extensions import db

class AccessToken(db.Model):
    """
    Server-side record of an issued bearer token.

    A JWT is only honoured while its row exists; revoking deletes the row.
    """
    __tablename__ = "access_tokens"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    jti = db.Column(db.String(64), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False, default="auth_token")
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    last_used_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship("User", back_populates="tokens")

    def __repr__(self):
        return f"<AccessToken user={self.user_id} jti={self.jti}>"
