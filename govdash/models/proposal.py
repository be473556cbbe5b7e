from govdash.extensions import db
from govdash.services.timing import utcnow


class Proposal(db.Model):
    __tablename__ = "proposals"

    id = db.Column(db.String(64), primary_key=True)
    organization_id = db.Column(
        db.String(64), db.ForeignKey("organizations.id"), nullable=False
    )
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    creator = db.Column(db.String(100), nullable=False)
    vote_type = db.Column(db.String(20), nullable=False, default="single-choice")
    options = db.Column(db.JSON, nullable=False, default=list)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending")
    summary = db.Column(db.Text, nullable=True)
    chain = db.Column(db.String(20), nullable=True)
    token_details = db.Column(db.JSON, nullable=True)
    hybrid_voting = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    last_edited_at = db.Column(db.DateTime, nullable=True)

    votes = db.relationship(
        "Vote", backref="proposal", lazy=True, order_by="Vote.id"
    )

    def ballots(self):
        return [vote.to_ballot() for vote in self.votes]

    def to_dict(self):
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "title": self.title,
            "description": self.description,
            "creator": self.creator,
            "vote_type": self.vote_type,
            "options": list(self.options or []),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "status": self.status,
            "summary": self.summary,
            "chain": self.chain,
            "token_details": self.token_details,
            "hybrid_voting": self.hybrid_voting,
            "created_at": self.created_at.isoformat(),
            "last_edited_at": (
                self.last_edited_at.isoformat() if self.last_edited_at else None
            ),
        }
