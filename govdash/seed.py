"""Demo organizations and proposals for a fresh database."""

from datetime import timedelta

import click
from flask import current_app

from govdash.extensions import db
from govdash.models import Organization, Proposal, Vote
from govdash.services.timing import utcnow

FIRST_MEMBER = "0x1234567890123456789012345678901234567890"
SECOND_MEMBER = "0x2345678901234567890123456789012345678901"
DFI_TOKEN = "0xabcdef1234567890abcdef1234567890abcdef12"


def _demo_rows(now):
    organizations = [
        Organization(
            id="org-1",
            name="DeFi Protocol",
            description="Decentralized finance protocol for lending and borrowing",
            creator=FIRST_MEMBER,
            chain="ethereum",
            token_address=DFI_TOKEN,
            token_name="DFI",
            website="https://defi-protocol.io",
            social_links={"twitter": "defiprotocol", "github": "defi-protocol"},
            members=[FIRST_MEMBER],
            created_at=now - timedelta(seconds=1000),
        ),
        Organization(
            id="org-2",
            name="NFT Collective",
            description="Artist collective for NFT creation and curation",
            creator=SECOND_MEMBER,
            chain="hedera",
            website="https://nft-collective.art",
            social_links={},
            members=[FIRST_MEMBER, SECOND_MEMBER],
            created_at=now - timedelta(seconds=500),
        ),
    ]

    token_details = {"name": "DeFi Token", "address": DFI_TOKEN}
    proposals = [
        Proposal(
            id="prop-1",
            organization_id="org-1",
            title="Implement DeFi Staking Protocol",
            description=(
                "Proposal to implement a staking protocol to allow users to earn "
                "rewards on their cryptocurrency holdings."
            ),
            creator=FIRST_MEMBER,
            vote_type="single-choice",
            options=["Approve", "Reject", "Abstain"],
            start_date=now - timedelta(seconds=300),
            end_date=now + timedelta(days=3),
            status="active",
            summary=(
                "This proposal aims to introduce a staking protocol that will enable "
                "platform users to earn rewards by staking their tokens."
            ),
            chain="ethereum",
            token_details=token_details,
            created_at=now - timedelta(seconds=300),
        ),
        Proposal(
            id="prop-2",
            organization_id="org-1",
            title="Treasury Allocation for Q2",
            description=(
                "Proposal to allocate treasury funds for development, marketing, "
                "and community initiatives in Q2."
            ),
            creator=FIRST_MEMBER,
            vote_type="token-weighted",
            options=["Approve Plan A", "Approve Plan B", "Reject Both Plans"],
            start_date=now - timedelta(seconds=500),
            end_date=now - timedelta(seconds=100),
            status="passed",
            chain="ethereum",
            token_details=token_details,
            created_at=now - timedelta(seconds=500),
            last_edited_at=now - timedelta(seconds=400),
        ),
        Proposal(
            id="prop-3",
            organization_id="org-2",
            title="Launch NFT Marketplace",
            description=(
                "Proposal to launch an NFT marketplace for the collective with a "
                "focus on sustainable and eco-friendly minting."
            ),
            creator=SECOND_MEMBER,
            vote_type="multiple-choice",
            options=[
                "Launch in Q2",
                "Launch in Q3",
                "Partner with existing marketplace",
                "Delay until 2024",
            ],
            start_date=now - timedelta(seconds=200),
            end_date=now + timedelta(days=5),
            status="active",
            chain="hedera",
            hybrid_voting={"nftAddress": "0x3456789012345678901234567890123456789012"},
            created_at=now - timedelta(seconds=200),
        ),
    ]

    votes = [
        Vote(
            proposal_id="prop-1",
            voter=SECOND_MEMBER,
            choice=0,
            timestamp=now - timedelta(seconds=100),
        ),
        Vote(
            proposal_id="prop-2",
            voter=FIRST_MEMBER,
            choice=0,
            weight=1000.0,
            timestamp=now - timedelta(seconds=300),
        ),
        Vote(
            proposal_id="prop-2",
            voter=SECOND_MEMBER,
            choice=0,
            weight=500.0,
            timestamp=now - timedelta(seconds=200),
        ),
    ]
    return organizations, proposals, votes


def seed_demo_data(now=None):
    """Insert the demo rows unless organizations already exist.

    Returns True when rows were written.
    """
    if Organization.query.first() is not None:
        current_app.logger.info("Database already has organizations; skipping demo seed")
        return False

    organizations, proposals, votes = _demo_rows(now or utcnow())
    db.session.add_all(organizations)
    db.session.add_all(proposals)
    db.session.flush()
    db.session.add_all(votes)
    db.session.commit()

    current_app.logger.info(
        "Seeded %d organizations and %d proposals", len(organizations), len(proposals)
    )
    return True


def register_seed_command(app):
    @app.cli.command("seed-demo")
    def seed_demo():
        """Load the demo organizations and proposals."""
        if seed_demo_data():
            click.echo("Demo data loaded.")
        else:
            click.echo("Database already populated; nothing to do.")
