from govdash.extensions import db
from govdash.services.timing import utcnow
from govdash.services.voting import Ballot, choice_from_raw


class Vote(db.Model):
    __tablename__ = "votes"
    __table_args__ = (
        db.UniqueConstraint("proposal_id", "voter", name="uq_votes_proposal_voter"),
    )

    id = db.Column(db.Integer, primary_key=True)
    proposal_id = db.Column(db.String(64), db.ForeignKey("proposals.id"), nullable=False)
    voter = db.Column(db.String(100), nullable=False)
    # int for single-choice ballots, list of ints for multiple-choice ones
    choice = db.Column(db.JSON, nullable=False)
    weight = db.Column(db.Float, nullable=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_ballot(self):
        return Ballot(
            voter=self.voter,
            choice=choice_from_raw(self.choice),
            weight=self.weight,
        )

    def to_dict(self):
        return {
            "voter": self.voter,
            "choice": self.choice,
            "weight": self.weight,
            "timestamp": self.timestamp.isoformat(),
        }
