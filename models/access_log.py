from datetime import datetime, timezone
from extensions import db

class AccessLog(db.Model):
    __tablename__ = "access_logs"

    id = db.Column(db.Integer, primary_key=True)
    # No foreign key: audit entries outlive the account that produced them
    user_id = db.Column(db.Integer, nullable=True, index=True)
    action = db.Column(db.String(50), nullable=False)
    target = db.Column(db.String(255), nullable=False)  # ex: "role:editor", "file:photo.png"
    timestamp = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Action types constants
    ACTION_TYPES = [
        'REGISTER', 'LOGIN', 'LOGOUT', 'LOGOUT_ALL',
        'CREATE_ROLE', 'UPDATE_ROLE', 'DELETE_ROLE',
        'CREATE_USER', 'UPDATE_USER', 'DELETE_USER',
        'UPLOAD_FILE', 'DELETE_FILE',
    ]

    def __repr__(self):
        return f"<AccessLog user={self.user_id} action={self.action} target={self.target}>"

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'action': self.action,
            'target': self.target,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }
