from govdash.extensions import db
from govdash.services.timing import utcnow


class Organization(db.Model):
    __tablename__ = "organizations"

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    creator = db.Column(db.String(100), nullable=False)
    chain = db.Column(db.String(20), nullable=False, default="ethereum")
    token_address = db.Column(db.String(100), nullable=True)
    token_name = db.Column(db.String(100), nullable=True)
    website = db.Column(db.String(300), nullable=True)
    social_links = db.Column(db.JSON, nullable=True)
    logo_url = db.Column(db.String(300), nullable=True)
    members = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    proposals = db.relationship(
        "Proposal",
        backref="organization",
        lazy=True,
        order_by="Proposal.created_at",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "creator": self.creator,
            "chain": self.chain,
            "token_address": self.token_address,
            "token_name": self.token_name,
            "website": self.website,
            "social_links": self.social_links or {},
            "logo_url": self.logo_url,
            "members": list(self.members or []),
            "proposals": [proposal.id for proposal in self.proposals],
            "created_at": self.created_at.isoformat(),
        }
