from datetime import datetime, timezone
from extensions import db

class File(db.Model):
    __tablename__ = "files"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)   # nom d'origine côté client
    path = db.Column(db.String(500), nullable=False)   # chemin relatif dans le stockage
    mime = db.Column(db.String(255), nullable=True)
    size = db.Column(db.BigInteger, nullable=False, default=0)  # en octets
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    owner = db.relationship("User", back_populates="files")

    __table_args__ = (
        db.Index('idx_files_user_created', 'user_id', 'created_at'),
    )

    def __repr__(self):
        return f"<File {self.name}>"

    @property
    def formatted_size(self):
        units = ['B', 'KB', 'MB', 'GB']
        size = float(self.size or 0)
        unit = 0
        while size >= 1024 and unit < len(units) - 1:
            size /= 1024
            unit += 1
        return f"{round(size, 2):g} {units[unit]}"

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'path': self.path,
            'mime': self.mime,
            'size': self.size,
            'formatted_size': self.formatted_size,
            'user_id': self.user_id,
            'user': {
                'id': self.owner.id,
                'name': self.owner.name,
                'email': self.owner.email,
            } if self.owner else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
